"""Constants for SmartForm"""

# ==================== Paths ====================
PATH_SEPARATOR = "."

# ==================== Layout ====================
SPAN_MIN = 1
SPAN_MAX = 12

# ==================== Field Defaults ====================
DEFAULT_TEXTAREA_ROWS = 3
DEFAULT_SCALAR_VALUE = ""
DEFAULT_SUBMIT_LABEL = "Submit"

# ==================== Configuration ====================
ENV_PREFIX = "SMARTFORM_"
ENV_NESTED_DELIMITER = "__"
CONFIG_FILE_DEFAULT = "smartform.toml"

# ==================== Template Names ====================
TEMPLATE_FORM = "form.html.j2"
TEMPLATE_FIELD_WRAPPER = "field_wrapper.html.j2"
TEMPLATE_TEXT_FIELD = "text_field.html.j2"
TEMPLATE_TEXTAREA_FIELD = "textarea_field.html.j2"
TEMPLATE_SELECT_FIELD = "select_field.html.j2"
TEMPLATE_ARRAY_FIELD = "array_field.html.j2"
TEMPLATE_SUBMIT_BUTTON = "submit_button.html.j2"

# ==================== Web ====================
API_PREFIX = "/api/v1"
WEB_HOST_DEFAULT = "127.0.0.1"
WEB_PORT_DEFAULT = 8000
