#!/usr/bin/env python3
"""
Workshop CRM Entry Point

Run the application with:
    python run.py

Or with uvicorn directly:
    uvicorn workshop.main:app --reload --port 8000
"""
import uvicorn

from workshop.config import get_settings


def main():
    """Run the Workshop CRM server"""
    settings = get_settings()
    print("=" * 50)
    print(f"  {settings.APP_NAME} v{settings.APP_VERSION}")
    print("=" * 50)
    print(f"  Server:  http://{settings.HOST}:{settings.PORT}")
    print(f"  Backend: {settings.API_URL}")
    print(f"  Debug:   {settings.DEBUG}")
    print("=" * 50)
    print()

    uvicorn.run(
        "workshop.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )


if __name__ == "__main__":
    main()
