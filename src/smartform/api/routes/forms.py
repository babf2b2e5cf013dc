from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from ...describe import FormDescription
from ...errors import SmartFormException
from ...form import Form
from ...loader import FormDeclaration
from ...renderers import HtmlRegistry

router = APIRouter(prefix="/forms", tags=["forms"])


class FormListResponse(BaseModel):
    success: bool = True
    forms: list[str]


class ValuesRequest(BaseModel):
    values: dict[str, Any] = {}


class FieldErrorResponse(BaseModel):
    path: str
    message: str


class ValidateResponse(BaseModel):
    success: bool
    data: dict[str, Any] | None = None
    errors: list[FieldErrorResponse] = []


def get_declaration(request: Request, name: str) -> FormDeclaration:
    declaration = request.app.state.declarations.get(name)
    if declaration is None:
        raise HTTPException(status_code=404, detail=f"Form not found: {name}")
    return declaration


def activate(declaration: FormDeclaration, values: dict[str, Any] | None = None) -> Form:
    initial = {**declaration.initial_values, **(values or {})}
    return Form(declaration.builder, initial_values=initial)


@router.get("", response_model=FormListResponse)
def list_forms(request: Request):
    return FormListResponse(forms=sorted(request.app.state.declarations))


@router.get("/{name}", response_model=FormDescription)
def get_form(request: Request, name: str):
    declaration = get_declaration(request, name)
    try:
        return activate(declaration).describe(request.app.state.settings.render)
    except SmartFormException as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{name}/describe", response_model=FormDescription)
def describe_values(request: Request, name: str, body: ValuesRequest):
    declaration = get_declaration(request, name)
    try:
        form = activate(declaration, body.values)
        result = form.validate()
        for error in result.errors:
            form.store.set_error(error.path, error.message)
        return form.describe(request.app.state.settings.render)
    except SmartFormException as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{name}/validate", response_model=ValidateResponse)
def validate_values(request: Request, name: str, body: ValuesRequest):
    form = activate(get_declaration(request, name), body.values)
    result = form.validate()
    if result.success:
        return ValidateResponse(success=True, data=result.data)
    return ValidateResponse(
        success=False,
        errors=[FieldErrorResponse(path=e.path, message=e.message) for e in result.errors],
    )


@router.get("/{name}/html", response_class=HTMLResponse)
def render_html(request: Request, name: str):
    declaration = get_declaration(request, name)
    try:
        html = activate(declaration).render(HtmlRegistry(), request.app.state.settings.render)
    except SmartFormException as e:
        raise HTTPException(status_code=400, detail=str(e))
    return HTMLResponse(html)
