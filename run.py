"""Server run script."""

import uvicorn
from heroville.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "heroville.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
