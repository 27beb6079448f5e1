import os

import uvicorn


if __name__ == "__main__":
    port = int(os.getenv("PORT", 3001))
    # Boot the local sighting service defined in roadkill/main.py
    uvicorn.run("roadkill.main:app", host="0.0.0.0", port=port, reload=True)
