"""
Utility script to generate and write the OpenAPI schema for the gateway.

This script builds the gateway application and serializes its OpenAPI schema
to interfaces/openapi.json so that API clients and documentation tools can
consume a stable document without running the services.

Usage:
    python -m mytodo.generate_openapi [output_path]

Notes:
- Building the app does not contact the backend services; RPC clients only
  connect on first use.
- The default output path is interfaces/openapi.json under the current directory.
"""
from __future__ import annotations

import json
import os
import sys
from typing import Any, Dict, List, Optional

from .gateway.main import create_app, openapi_tags

DEFAULT_OUTPUT = os.path.join("interfaces", "openapi.json")


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Ensure the OpenAPI schema contains the gateway's tag metadata without
    overriding tag definitions that are already present.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


# PUBLIC_INTERFACE
def generate_openapi(out_path: Optional[str] = None) -> str:
    """Generate the gateway OpenAPI schema file and return the written file path."""
    out_path = out_path or DEFAULT_OUTPUT
    app = create_app()
    try:
        schema = app.openapi()
    finally:
        # The lifespan never runs here, so release the RPC clients directly
        app.state.user_client.close()
        app.state.todo_client.close()
    _ensure_tags(schema)

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    return out_path


def main() -> None:
    out_path = generate_openapi(sys.argv[1] if len(sys.argv) > 1 else None)
    print(f"Wrote OpenAPI schema to: {out_path}")


if __name__ == "__main__":
    main()
