#!/usr/bin/env python
"""Web server startup script for local development."""

import os
import sys
from pathlib import Path

from smartform.config import Settings
from smartform.consts import CONFIG_FILE_DEFAULT


def main():
    """Start the web server."""
    config_path = sys.argv[1] if len(sys.argv) > 1 else CONFIG_FILE_DEFAULT

    if not Path(config_path).exists():
        print(f"Configuration file not found: {config_path}")
        sys.exit(1)

    settings = Settings.load_from_file(config_path)

    if not settings.forms:
        print("No forms configured.")
        print(f'Please list declaration files in {config_path}, e.g. forms = ["forms/profile.toml"]')
        sys.exit(1)

    host = settings.web.host
    port = settings.web.port

    print(f"Starting web service on http://{host}:{port}")
    print("Press Ctrl+C to stop")

    os.environ["SMARTFORM_CONFIG_FILE"] = str(Path(config_path).resolve())

    import uvicorn

    uvicorn.run(
        "smartform.api:create_app",
        host=host,
        port=port,
        factory=True,
        reload=settings.web.reload,
    )


if __name__ == "__main__":
    main()
