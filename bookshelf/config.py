# bookshelf/config.py
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    # Server
    host: str = os.getenv("BOOKSHELF_HOST", "127.0.0.1")
    port: int = int(os.getenv("BOOKSHELF_PORT", "3000"))

    # Backing file holding the JSON array of books
    data_file: str = os.getenv("BOOKSHELF_DATA_FILE", "books.json")

    log_level: str = os.getenv("BOOKSHELF_LOG_LEVEL", "INFO").upper()


settings = Settings()
