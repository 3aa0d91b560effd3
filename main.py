import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from chess_daily.app import create_app
from chess_daily.infra.config.settings import settings

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
