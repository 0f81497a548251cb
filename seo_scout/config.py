# === FILE: seo_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации SeoScout.
Используется Pydantic для описания схемы и проверки данных.

Секреты (client secret Google, ключ языковой модели) можно не хранить в файле:
они подхватываются из переменных окружения GOOGLE_CLIENT_ID,
GOOGLE_CLIENT_SECRET и OPENAI_API_KEY.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

SEARCH_CONSOLE_READONLY_SCOPE = "https://www.googleapis.com/auth/webmasters.readonly"


class GoogleOAuthConfig(BaseModel):
    """Параметры OAuth-клиента Google."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    client_id: Optional[str] = Field(None, description="OAuth client ID.")
    client_secret: Optional[str] = Field(None, description="OAuth client secret.", repr=False)
    redirect_uri: str = Field("http://localhost:3000/gsc-callback", description="Redirect URI для code flow.")
    auth_uri: str = Field("https://accounts.google.com/o/oauth2/v2/auth", description="Страница согласия.")
    token_uri: str = Field("https://oauth2.googleapis.com/token", description="Token endpoint.")
    scopes: List[str] = Field(default_factory=lambda: [SEARCH_CONSOLE_READONLY_SCOPE])
    timeout: float = Field(10.0, gt=0, description="Таймаут запроса к token endpoint (секунд).")

    @field_validator("client_id", "client_secret", mode="before")
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class SearchConsoleConfig(BaseModel):
    """Параметры запросов к Search Console API."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    api_base: str = Field("https://searchconsole.googleapis.com/webmasters/v3")
    row_limit: int = Field(1000, ge=1, le=25000, description="rowLimit запроса searchAnalytics.")
    window_days: int = Field(7, ge=1, description="Длина скользящего окна в днях.")
    timeout: float = Field(15.0, gt=0, description="Таймаут запроса (секунд).")

    @field_validator("api_base", mode="before")
    def _strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.rstrip("/")
        return v


class CrawlerConfig(BaseModel):
    """Параметры обхода sitemap."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout: float = Field(15.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("SeoScoutBot/1.0", min_length=1, description="Заголовок User-Agent.")
    max_concurrency: int = Field(5, ge=1, description="Сколько дочерних sitemap качать параллельно.")


class LLMConfig(BaseModel):
    """Параметры модели для генерации анкоров."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    model: str = Field("gpt-4", min_length=1)
    api_key: Optional[str] = Field(None, repr=False)
    base_url: Optional[str] = Field(None, description="OpenAI-совместимый endpoint.")
    timeout: float = Field(20.0, gt=0)
    max_words: int = Field(6, ge=1, description="Максимум слов в анкоре.")

    @field_validator("api_key", mode="before")
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class Settings(BaseModel):
    """Полная конфигурация SeoScout."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    google: GoogleOAuthConfig = Field(default_factory=GoogleOAuthConfig)
    search_console: SearchConsoleConfig = Field(default_factory=SearchConsoleConfig)
    crawler: CrawlerConfig = Field(default_factory=CrawlerConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)


_DEFAULT_CFG = Path("configs/default.yaml")

# переменная окружения -> (секция, ключ)
_ENV_OVERRIDES: Dict[str, tuple[str, str]] = {
    "GOOGLE_CLIENT_ID": ("google", "client_id"),
    "GOOGLE_CLIENT_SECRET": ("google", "client_secret"),
    "GOOGLE_REDIRECT_URI": ("google", "redirect_uri"),
    "OPENAI_API_KEY": ("llm", "api_key"),
}


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def _apply_env(data: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    for var, (section, key) in _ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            sub = data.setdefault(section, {})
            if not isinstance(sub, dict):
                raise TypeError(f"Секция '{section}' должна быть mapping")
            sub[key] = value
    return data


def load_config(
    path: Union[str, Path, None] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Читает YAML или JSON и возвращает проверенный объект Settings.

    Если path не указан, используется configs/default.yaml (при наличии),
    иначе значения по умолчанию. Переменные окружения перекрывают файл.
    """
    env = os.environ if env is None else env

    if path is None:
        data: dict[str, Any] = _read_yaml(_DEFAULT_CFG) if _DEFAULT_CFG.is_file() else {}
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

        suffix = path_obj.suffix.lower()
        if suffix in (".yaml", ".yml"):
            data = _read_yaml(path_obj)
        elif suffix == ".json":
            data = _read_json(path_obj)
        else:
            raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return Settings(**_apply_env(data, env))


__all__ = [
    "GoogleOAuthConfig",
    "SearchConsoleConfig",
    "CrawlerConfig",
    "LLMConfig",
    "Settings",
    "load_config",
    "SEARCH_CONSOLE_READONLY_SCOPE",
]
