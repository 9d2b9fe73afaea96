"""
Setup a local bookstore with sample data and run the backend server.

This script:
1. Loads the sample catalog from seed_books.json into the in-memory store
2. Writes a placeholder PDF for the locally stored sample book
3. Creates an admin and a demo reader who already owns that book
4. Starts the FastAPI backend server

Everything lives in memory, so the data is gone when the server stops.
"""

import asyncio
import sys
from pathlib import Path
from uuid import UUID

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ebookstore.application.api import create_app
from ebookstore.application.config import settings
from ebookstore.application.controller import build_controller
from ebookstore.domain.entities.requests import RegisterRequest

SEED_FILE = Path(__file__).parent / "seed_books.json"
LOCAL_BOOK_ID = UUID("6f1d2c3b-0a4e-4f5a-9b8c-1d2e3f4a5b6c")
PLACEHOLDER_PDF = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\ntrailer << /Root 1 0 R >>\n%%EOF\n"

DEMO_EMAIL = "reader@example.com"
DEMO_PASSWORD = "reader123"


async def setup_sample_data(controller):
    """Seed books, a placeholder file and two accounts."""

    print("=" * 60)
    print("Setting up sample data...")
    print("=" * 60)

    # 1. Sample catalog
    count = controller.book_repository.load_seed_file(SEED_FILE)
    print(f"\n✓ Loaded {count} books from {SEED_FILE.name}")

    # 2. Placeholder file for the book stored in the upload directory
    book = await controller.book_repository.get_book(LOCAL_BOOK_ID)
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    pdf_path = upload_dir / book.file_url
    if not pdf_path.exists():
        pdf_path.write_bytes(PLACEHOLDER_PDF)
    print(f"\n✓ Book file ready: {pdf_path}")

    # 3. Accounts
    await controller.accounts.provision_admin("Admin User", "admin@example.com", "admin123")
    reader = await controller.accounts.register(
        RegisterRequest(name="Demo Reader", email=DEMO_EMAIL, password=DEMO_PASSWORD)
    )
    await controller.entitlements.purchase(reader.id, book.id)
    print("\n✓ Added admin: admin@example.com")
    print(f"✓ Added reader: {DEMO_EMAIL} (owns '{book.title}')")

    print("\n" + "=" * 60)
    print("Sample data setup complete!")
    print("=" * 60)
    print("\nYou can now:")
    print(f"1. Log in: POST /api/users/login with {DEMO_EMAIL} / {DEMO_PASSWORD}")
    print("2. Browse: GET /api/books")
    print(f"3. Read: GET /api/books/{book.id}/pdf?token=<token>")
    print("\n" + "=" * 60 + "\n")


def run_server():
    """Run the FastAPI server."""
    import uvicorn

    if settings.storage_backend != "local":
        raise SystemExit("setup_and_run.py only supports STORAGE_BACKEND=local")

    controller = build_controller(settings)
    asyncio.run(setup_sample_data(controller))
    app = create_app(controller=controller)

    # Start the server
    print(f"Starting FastAPI server on http://localhost:{settings.api_port}")
    print("Press Ctrl+C to stop\n")

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="info"
    )


if __name__ == "__main__":
    run_server()
