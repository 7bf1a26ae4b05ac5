"""Application settings loaded from environment variables."""

import functools
import os
import pathlib
import typing

import pydantic

StorageBackend = typing.Literal['local', 'remote']


class Settings(pydantic.BaseModel):
    """Runtime configuration for the rosemary app."""

    data_dir: pathlib.Path = pathlib.Path('data')
    database_url: str | None = None
    sql_echo: bool = False
    storage_backend: StorageBackend = 'local'
    storage_url: str | None = None
    storage_key: str | None = None
    storage_bucket: str = 'rosemary-photos'

    @property
    def resolved_database_url(self) -> str:
        """Database URL, defaulting to a SQLite file inside the data directory."""
        if self.database_url:
            return self.database_url
        return f'sqlite:///{self.data_dir / "rosemary.db"}'

    @property
    def upload_dir(self) -> pathlib.Path:
        """Directory holding locally stored photos."""
        return self.data_dir / 'uploads'

    @pydantic.model_validator(mode='after')
    def _check_remote_storage(self) -> 'Settings':
        if self.storage_backend == 'remote' and not (
            self.storage_url and self.storage_key
        ):
            raise ValueError(
                'STORAGE_URL and STORAGE_KEY are required when STORAGE_BACKEND=remote'
            )
        return self


def load_settings(environ: typing.Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables."""
    env = os.environ if environ is None else environ
    values: dict[str, typing.Any] = {
        'data_dir': env.get('DATA_DIR', 'data'),
        'database_url': env.get('DATABASE_URL') or None,
        'sql_echo': env.get('SQL_ECHO', 'false'),
        'storage_backend': env.get('STORAGE_BACKEND', 'local').lower(),
        'storage_url': env.get('STORAGE_URL') or None,
        'storage_key': env.get('STORAGE_KEY') or None,
    }
    if env.get('STORAGE_BUCKET'):
        values['storage_bucket'] = env['STORAGE_BUCKET']
    return Settings.model_validate(values)


@functools.cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded on first use."""
    return load_settings()
