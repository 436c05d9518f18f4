import os

import uvicorn

if __name__ == "__main__":
    # 开发环境自动重载
    is_dev = os.getenv("APP_ENV", "dev") == "dev"

    uvicorn.run(
        "ecom_api.main:app",
        host="127.0.0.1",  # 只监听本地
        port=8000,
        reload=is_dev,
        log_level="info"
    )
