"""Pytest configuration and shared fixtures for AdInsight tests."""

import pytest

from adinsight_mcp.core.config import get_settings
from adinsight_mcp.models.campaign import Campaign

# Meta Ads export: semicolon separated, Spanish headers, dotted thousands
META_REPORT = (
    "Nombre de la campaña;Importe gastado (CLP);Resultados;"
    "Costo por resultado;Alcance;Impresiones\n"
    'Campaña Verano;"1.234.567";150;8.230;45.000;120.000\n'
    "Campaña Invierno;500.000;0;0;12.500;30.000\n"
    "Resumen de la cuenta;1.734.567;150;;57.500;150.000\n"
)

# Google Ads export: preamble lines before the header, comma separated
GOOGLE_REPORT = (
    "Informe de rendimiento\n"
    '"1 de enero de 2024 - 31 de enero de 2024"\n'
    "Campaña,Estado,Costo,Conversiones,Costo/conv.,Impr.\n"
    '"Search - Brand",Habilitada,"1,234.56",45,27.43,"12,345"\n'
    'Display,Pausada,"77,625",0,0,208.562\n'
    'Total: cuenta,,"78,859.56",45,,"220,907"\n'
)


@pytest.fixture
def meta_report() -> str:
    return META_REPORT


@pytest.fixture
def google_report() -> str:
    return GOOGLE_REPORT


@pytest.fixture
def sample_campaigns() -> list[Campaign]:
    """Three campaigns with costs per result of 10, 30 and 0."""
    return [
        Campaign(id="c-0", name="Alpha", spend=100, results=10, reach=1000),
        Campaign(id="c-1", name="beta", spend=300, results=10, reach=500),
        Campaign(id="c-2", name="Gamma", spend=0, results=0, reach=0),
    ]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep real credentials and cached settings out of every test."""
    for name in (
        "ADI_GEMINI__API_KEY",
        "GEMINI_API_KEY",
        "GOOGLE_API_KEY",
        "ADI_ENVIRONMENT",
        "ADI_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
