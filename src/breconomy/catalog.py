"""Static catalog of the indicators this service tracks.

Each definition ties together the store name, the SGS series code, the cache
key and the public route ``/indicators/{type}[/{window}]``. Refresh job
configurations are derived from it at startup.
"""

from dataclasses import dataclass
from datetime import timedelta

from breconomy.config import RefreshSettings

SGS_SERIES_PATH = "dados/serie/bcdata.sgs.{code}/dados/ultimos/1?formato=json"


@dataclass(frozen=True)
class IndicatorDefinition:
    """One tracked indicator and how it is exposed."""

    name: str
    type: str
    window: str | None
    sgs_code: int
    cache_key: str
    display_name: str
    description: str

    @property
    def source_path(self) -> str:
        return SGS_SERIES_PATH.format(code=self.sgs_code)

    @property
    def route(self) -> str:
        if self.window is None:
            return f"/indicators/{self.type}"
        return f"/indicators/{self.type}/{self.window}"


@dataclass(frozen=True)
class RefreshJobConfig:
    """Parameters of a single refresh job instance."""

    name: str
    source_path: str
    cache_key: str
    update_interval: timedelta = timedelta(hours=24)
    initial_delay: timedelta = timedelta(seconds=2)
    cache_margin: timedelta = timedelta(hours=1)

    @property
    def cache_ttl(self) -> timedelta:
        """Cache entries outlive the refresh interval by the safety margin."""
        return self.update_interval + self.cache_margin


INDICATORS: tuple[IndicatorDefinition, ...] = (
    IndicatorDefinition(
        name="SELIC",
        type="selic",
        window=None,
        sgs_code=432,
        cache_key="indicador:selic",
        display_name="Selic",
        description="Brazilian policy interest rate target (% p.a.)",
    ),
    IndicatorDefinition(
        name="CDI_YTD",
        type="cdi",
        window="ytd",
        sgs_code=4391,
        cache_key="indicador:cdi:ytd",
        display_name="CDI",
        description="Interbank deposit rate accumulated in the year (%)",
    ),
    IndicatorDefinition(
        name="CDI_12M",
        type="cdi",
        window="12m",
        sgs_code=4392,
        cache_key="indicador:cdi:12m",
        display_name="CDI",
        description="Interbank deposit rate accumulated over 12 months (%)",
    ),
    IndicatorDefinition(
        name="IPCA_YTD",
        type="ipca",
        window="ytd",
        sgs_code=433,
        cache_key="indicador:ipca:ytd",
        display_name="IPCA",
        description="Consumer price inflation, monthly change (%)",
    ),
    IndicatorDefinition(
        name="IPCA_12M",
        type="ipca",
        window="12m",
        sgs_code=13522,
        cache_key="indicador:ipca:12m",
        display_name="IPCA",
        description="Consumer price inflation accumulated over 12 months (%)",
    ),
    IndicatorDefinition(
        name="DOLAR",
        type="dolar",
        window=None,
        sgs_code=1,
        cache_key="indicador:dolar",
        display_name="Dollar",
        description="USD/BRL exchange rate, sell quote",
    ),
)


def find_indicator(
    indicator_type: str,
    window: str | None = None,
    indicators: tuple[IndicatorDefinition, ...] = INDICATORS,
) -> IndicatorDefinition | None:
    """Look up a definition by route segments (case-insensitive)."""
    indicator_type = indicator_type.lower()
    window = window.lower() if window is not None else None
    for definition in indicators:
        if definition.type == indicator_type and definition.window == window:
            return definition
    return None


def build_job_configs(
    settings: RefreshSettings,
    indicators: tuple[IndicatorDefinition, ...] = INDICATORS,
) -> list[RefreshJobConfig]:
    """Build one refresh job configuration per catalog entry."""
    return [
        RefreshJobConfig(
            name=definition.name,
            source_path=definition.source_path,
            cache_key=definition.cache_key,
            update_interval=settings.update_interval,
            initial_delay=settings.initial_delay,
            cache_margin=settings.cache_margin,
        )
        for definition in indicators
    ]
