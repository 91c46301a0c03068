"""
QR code links for printing - the image itself comes from an external
QR rendering service.
"""

from urllib.parse import quote

QR_SERVICE_URL = 'https://api.qrserver.com/v1/create-qr-code/'
DEFAULT_QR_SIZE = 200


def table_url(base_url, restaurant_slug, table_label):
    """Customer page a table's QR code points at"""
    return f"{base_url.rstrip('/')}/u/{quote(restaurant_slug, safe='')}/{quote(table_label, safe='')}"


def qr_image_url(url, size=DEFAULT_QR_SIZE):
    return f"{QR_SERVICE_URL}?size={size}x{size}&data={quote(url, safe='')}"


def table_qr_entries(base_url, restaurant, tables, size=DEFAULT_QR_SIZE):
    entries = []
    for table in tables:
        url = table_url(base_url, restaurant.slug, table.label)
        entries.append({
            'table': table.to_dict(),
            'url': url,
            'qr_image_url': qr_image_url(url, size)
        })
    return entries
