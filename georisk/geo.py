"""Map coordinates and ISO country codes onto dashboard regions."""

from georisk.config import GLOBAL

# Checked in order; the first box containing the point wins. Middle East is
# checked first because its box overlaps Europe, Africa and Asia-Pacific.
REGION_BOUNDARIES = [
    ("middle-east",   {"lat": (10, 45),  "lng": (25, 75)}),
    ("north-america", {"lat": (15, 75),  "lng": (-170, -50)}),
    ("europe",        {"lat": (35, 72),  "lng": (-10, 60)}),
    ("asia-pacific",  {"lat": (-60, 60), "lng": (60, 180)}),
    ("south-america", {"lat": (-56, 13), "lng": (-82, -35)}),
    ("africa",        {"lat": (-35, 40), "lng": (-18, 55)}),
]

COUNTRY_REGIONS = {
    "north-america": ["US", "CA", "MX"],
    "europe": [
        "GB", "DE", "FR", "IT", "ES", "PL", "UA", "RU", "NL", "BE", "CH", "AT",
        "SE", "NO", "FI", "DK", "PT", "GR", "CZ", "RO",
    ],
    "asia-pacific": [
        "CN", "JP", "KR", "IN", "AU", "NZ", "ID", "TH", "VN", "PH", "MY", "SG",
        "TW", "PK", "BD", "MM",
    ],
    "middle-east": ["SA", "AE", "IR", "IQ", "IL", "TR", "SY", "JO", "LB", "KW", "QA", "YE"],
    "africa": [
        "EG", "ZA", "NG", "KE", "ET", "GH", "TZ", "MA", "DZ", "TN", "LY", "SD",
        "UG", "SN", "CI",
    ],
    "south-america": ["BR", "AR", "CO", "CL", "PE", "VE", "EC", "BO"],
}

_COUNTRY_TO_REGION = {code: rk for rk, codes in COUNTRY_REGIONS.items() for code in codes}

# GDELT reports source countries by name rather than ISO code
COUNTRY_NAME_CODES = {
    "United States": "US", "Canada": "CA", "Mexico": "MX",
    "United Kingdom": "GB", "Germany": "DE", "France": "FR", "Italy": "IT",
    "Spain": "ES", "Poland": "PL", "Ukraine": "UA", "Russia": "RU",
    "Netherlands": "NL", "Belgium": "BE", "Switzerland": "CH", "Austria": "AT",
    "Sweden": "SE", "Norway": "NO", "Finland": "FI", "Denmark": "DK",
    "Portugal": "PT", "Greece": "GR", "Czech Republic": "CZ", "Romania": "RO",
    "China": "CN", "Japan": "JP", "South Korea": "KR", "India": "IN",
    "Australia": "AU", "New Zealand": "NZ", "Indonesia": "ID", "Thailand": "TH",
    "Vietnam": "VN", "Philippines": "PH", "Malaysia": "MY", "Singapore": "SG",
    "Taiwan": "TW", "Pakistan": "PK", "Bangladesh": "BD", "Myanmar": "MM",
    "Saudi Arabia": "SA", "United Arab Emirates": "AE", "Iran": "IR", "Iraq": "IQ",
    "Israel": "IL", "Turkey": "TR", "Syria": "SY", "Jordan": "JO", "Lebanon": "LB",
    "Kuwait": "KW", "Qatar": "QA", "Yemen": "YE",
    "Egypt": "EG", "South Africa": "ZA", "Nigeria": "NG", "Kenya": "KE",
    "Ethiopia": "ET", "Ghana": "GH", "Tanzania": "TZ", "Morocco": "MA",
    "Algeria": "DZ", "Tunisia": "TN", "Libya": "LY", "Sudan": "SD", "Uganda": "UG",
    "Senegal": "SN", "Ivory Coast": "CI",
    "Brazil": "BR", "Argentina": "AR", "Colombia": "CO", "Chile": "CL", "Peru": "PE",
    "Venezuela": "VE", "Ecuador": "EC", "Bolivia": "BO",
}


def country_to_region(code):
    if not code:
        return GLOBAL
    code = code.strip()
    if len(code) != 2:
        code = COUNTRY_NAME_CODES.get(code, "")
    return _COUNTRY_TO_REGION.get(code.upper(), GLOBAL)


def region_from_coordinates(lat, lng):
    if lat is None or lng is None:
        return GLOBAL
    for rk, box in REGION_BOUNDARIES:
        (lat_lo, lat_hi), (lng_lo, lng_hi) = box["lat"], box["lng"]
        if lat_lo <= lat <= lat_hi and lng_lo <= lng <= lng_hi:
            return rk
    return GLOBAL
