"""ASGI entry point for the local migration API.

Usage:
    - uvicorn app:app --host 127.0.0.1 --port 8000
    - Development: uvicorn app:app --reload
"""

import sys
from pathlib import Path

# Add src to Python path for imports (MUST be before importing msp_migrate)
src_path = Path(__file__).parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from msp_migrate.main import create_app  # noqa: E402

app = create_app()
