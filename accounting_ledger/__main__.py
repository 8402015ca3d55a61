"""
Run the API server.

    python -m accounting_ledger
"""

import uvicorn

from accounting_ledger.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "accounting_ledger.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
