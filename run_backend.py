import os
import uvicorn


if __name__ == "__main__":
    port = int(os.getenv("PORT", 5000))
    print(f"Starting PDC Pro backend on port {port}...")
    uvicorn.run("pdc_pro.main:app", host="0.0.0.0", port=port, reload=False)
