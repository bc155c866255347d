from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8000

    portal_base_url: str = "https://webapps.illinois.gov"
    portal_search_url: str = "https://webapps.illinois.gov/EPA/DocumentExplorer/Attributes"
    portal_documents_url: str = (
        "https://webapps.illinois.gov/EPA/DocumentExplorer/Documents/Index/{facility_id}"
    )
    viewer_link_keyword: str = "docuware"
    default_document_category: str = "LUST Technical"

    browser_headless: bool = True
    browser_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "Chrome/120.0.0.0 Safari/537.36"
    )
    navigation_timeout_ms: int = 60000
    search_settle_ms: int = 3000
    viewer_settle_ms: int = 8000
    row_select_settle_ms: int = 2000
    viewer_open_timeout_ms: int = 6000
    viewer_load_settle_ms: int = 4000

    min_document_bytes: int = 500
    capture_timeout_seconds: float = 15.0
    embedded_source_timeout_seconds: float = 30.0
    toolbar_timeout_seconds: float = 25.0
    menu_timeout_seconds: float = 25.0
    print_timeout_seconds: float = 30.0
    download_race_timeout_seconds: float = 20.0
    download_timeout_seconds: float = 60.0

    pdf_engine: str = "pdfplumber"
    digital_word_threshold: int = 50
    min_text_chars: int = 100
    ocr_engine: str = "tesseract"
    ocr_language: str = "eng"
    ocr_dpi: int = 200
    ocr_max_pages: int = 25

    summarization_provider: str = "openai"
    summary_max_chars: int = 14000
    summarization_openai_api_key: str = ""
    summarization_openai_model_name: str = "gpt-4o-mini"
    summarization_openai_timeout_seconds: int = 60
    summarization_openai_temperature: float = 0.2
    summarization_openai_compatible_base_url: str = ""
    summarization_openai_compatible_api_key: str = ""
    summarization_openai_compatible_model_name: str = ""
    summarization_openrouter_api_key: str = ""
    summarization_openrouter_model_name: str = ""
    summarization_groq_api_key: str = ""
    summarization_groq_model_name: str = ""
    summarization_ollama_model_name: str = ""
