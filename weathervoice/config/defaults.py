"""Default upstream endpoints per provider."""

from weathervoice.config.schema import Provider

DEFAULT_UPSTREAM_URLS: dict[Provider, str] = {
    Provider.OPEN_METEO: "https://api.open-meteo.com/v1/forecast",
    Provider.SMN: "https://ws.smn.gob.ar/map_items/weather",
}

CALLBACK_URL_ENV = "WEATHERVOICE_CALLBACK_URL"
