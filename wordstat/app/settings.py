from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    SORT_THRESHOLD: int = 1024      # tramos <= umbral se ordenan secuencialmente
    SORT_PARALLELISM: int = 0       # 0 = os.cpu_count()
    READ_CHUNK_BYTES: int = 65536
    LEGACY_EXIT_CODES: bool = False # True = salir siempre con 0 (comportamiento histórico)
    SHARED_DIR: str = "/data/shared"

settings = Settings()
