import pytest

from src.domain.device import (
    DeviceInfo,
    GeoLocation,
    client_ip_from_headers,
    detect_browser,
    detect_device_name,
    device_info_from_headers,
    merge_device_info,
)

CHROME_MAC = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
EDGE_WIN = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 Edg/120.0.0.0"
)
SAFARI_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
FIREFOX_ANDROID = "Mozilla/5.0 (Android 14; Mobile; rv:121.0) Gecko/121.0 Firefox/121.0"


@pytest.mark.parametrize(
    "user_agent,expected",
    [
        (CHROME_MAC, "Chrome"),
        (EDGE_WIN, "Edge"),
        (SAFARI_IPHONE, "Safari"),
        (FIREFOX_ANDROID, "Firefox"),
        ("Mozilla/5.0 (compatible; MSIE 10.0; Windows NT 6.1; Trident/6.0)", "Internet Explorer"),
        ("curl/8.0", "Unknown"),
    ],
)
def test_detect_browser(user_agent, expected):
    assert detect_browser(user_agent) == expected


@pytest.mark.parametrize(
    "user_agent,expected",
    [
        (CHROME_MAC, "Desktop"),
        (SAFARI_IPHONE, "iPhone"),
        (FIREFOX_ANDROID, "Android device"),
    ],
)
def test_detect_device_name(user_agent, expected):
    assert detect_device_name(user_agent) == expected


def test_client_ip_prefers_first_forwarded_hop():
    headers = {"x-forwarded-for": "203.0.113.7, 10.0.0.1", "x-real-ip": "10.0.0.2"}

    assert client_ip_from_headers(headers) == "203.0.113.7"


def test_client_ip_falls_back_in_order():
    assert client_ip_from_headers({"x-real-ip": "10.0.0.2", "x-client-ip": "10.0.0.3"}) == "10.0.0.2"
    assert client_ip_from_headers({"x-client-ip": "10.0.0.3"}) == "10.0.0.3"
    assert client_ip_from_headers({}) is None


def test_device_info_from_headers():
    device = device_info_from_headers({"user-agent": CHROME_MAC}, client_host="127.0.0.1")

    assert device.browser_name == "Chrome"
    assert device.device_name == "Desktop"
    assert device.ip == "127.0.0.1"
    assert device.user_agent == CHROME_MAC


def test_merge_prefers_client_values():
    client = DeviceInfo(browser_name="Brave", location=GeoLocation(city="Pune"))
    server = DeviceInfo(browser_name="Chrome", device_name="Desktop", ip="203.0.113.7")

    merged = merge_device_info(client, server)

    assert merged.browser_name == "Brave"
    assert merged.device_name == "Desktop"
    assert merged.ip == "203.0.113.7"
    assert merged.location.city == "Pune"


def test_merge_without_client():
    server = DeviceInfo(ip="203.0.113.7")

    assert merge_device_info(None, server).ip == "203.0.113.7"
    assert merge_device_info(None, None) == DeviceInfo()


def test_device_info_accepts_camel_case():
    device = DeviceInfo.model_validate(
        {"deviceName": "Pixel", "browserName": "Chrome", "userAgent": "ua"}
    )

    assert device.device_name == "Pixel"
    assert device.model_dump(by_alias=True)["browserName"] == "Chrome"


def test_geo_location_place():
    assert GeoLocation(city="Pune", region="MH", country="India").place() == "Pune, MH, India"
    assert GeoLocation().place() == ""
    assert GeoLocation(lat=0.0, lon=0.0).has_coordinates() is True
