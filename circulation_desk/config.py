"""Configuration management using Pydantic Settings"""

from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from circulation_desk.domain.models import MAX_BORROW_DAYS, LibraryConfig


class Settings(BaseSettings):
    """Application configuration loaded from environment variables (LIBRARY_*)"""

    model_config = SettingsConfigDict(
        env_prefix="LIBRARY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Circulation defaults, offered at the startup prompts
    daily_fine_rate: Decimal = Field(default=Decimal("0.50"), ge=0)
    book_borrow_days: int = Field(default=14, gt=0, le=MAX_BORROW_DAYS)
    magazine_borrow_days: int = Field(default=7, gt=0, le=MAX_BORROW_DAYS)

    # Service
    service_name: str = "circulation-desk"
    log_level: str = "WARNING"

    def library_config(self) -> LibraryConfig:
        """Domain configuration built from these settings"""
        return LibraryConfig(
            daily_fine_rate=self.daily_fine_rate,
            book_borrow_days=self.book_borrow_days,
            magazine_borrow_days=self.magazine_borrow_days,
        )


settings = Settings()
