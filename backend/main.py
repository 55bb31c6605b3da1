import os

import uvicorn

if __name__ == "__main__":
    # reload only when explicitly asked for
    reload = os.getenv("RELOAD", "false").lower() == "true"

    uvicorn.run(
        "bizhub.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=reload,
        log_level="info"
    )
