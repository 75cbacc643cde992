# accounts/main.py  (uvicorn accounts.main:app)
from dotenv import load_dotenv

# 루트 .env 로딩 (Settings가 읽기 전에 한 번에)
load_dotenv()

from accounts.app import create_app  # noqa: E402

app = create_app()
