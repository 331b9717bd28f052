from urllib.parse import parse_qs, urlencode, urlparse


def build_share_url(base_url, share_id):
    """https://<host>/?share=<share_id>"""
    return f"{base_url.rstrip('/')}/?{urlencode({'share': share_id})}"


def parse_share_token(value):
    """
    从分享链接中取出 share token；传入的不是链接时原样视为 token

    Returns:
        Optional[str]: token，链接中没有 share 参数时返回 None
    """
    value = (value or "").strip()
    if not value:
        return None
    if "://" not in value and not value.startswith(("/", "?")):
        return value
    tokens = parse_qs(urlparse(value).query).get("share")
    return tokens[0] if tokens else None
