from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    app_title: str = 'Kenan Kadıoğlu Gayrimenkul'
    app_description: str = 'Emlak sitesi sohbet ve ilan servisi'
    database_url: str = Field(
        'sqlite+aiosqlite:///./estate.db',
        json_schema_extra={'env': 'DATABASE_URL'}
    )
    test_database_url: str = Field(
        'sqlite+aiosqlite:///./test_estate.db',
        json_schema_extra={'env': 'TEST_DATABASE_URL'}
    )
    use_test_db: bool = False
    database_echo: bool = False

    gemini_api_key: str = Field(
        '',
        json_schema_extra={'env': 'GEMINI_API_KEY'}
    )
    gemini_model: str = 'gemini-2.0-flash'
    gemini_max_output_tokens: int = 500
    gemini_temperature: float = 0.7

    chat_history_limit: int = 20
    cors_origins: list[str] = [
        'http://localhost:3000',
        'http://127.0.0.1:3000',
    ]
    log_file: str = 'estate_fastapi.log'

    model_config = SettingsConfigDict(
        extra="allow",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    def get_database_url(self, test: bool = False) -> str:
        return self.test_database_url if test else self.database_url


settings = Settings()
