"""
Conversion entre la liste d'images d'une annonce et l'ancien format
``imageUrl`` (URLs séparées par des virgules).
"""
from typing import Iterable, List, Optional


def split_image_urls(image_url: Optional[str]) -> List[str]:
    """"url1,url2" -> ["url1", "url2"] (segments vides ignorés)"""
    if not image_url or not image_url.strip():
        return []
    return [url.strip() for url in image_url.split(",") if url.strip()]


def join_image_urls(image_urls: Optional[Iterable[str]]) -> Optional[str]:
    """["url1", "url2"] -> "url1,url2"; None si la liste est vide"""
    urls = clean_image_urls(image_urls or [])
    return ",".join(urls) if urls else None


def clean_image_urls(image_urls: Iterable[str]) -> List[str]:
    return [url.strip() for url in image_urls if url and url.strip()]


def append_image_urls(existing: Iterable[str], new_urls: Iterable[str]) -> List[str]:
    urls = clean_image_urls(existing)
    for url in clean_image_urls(new_urls):
        if url not in urls:
            urls.append(url)
    return urls


def remove_image_urls(existing: Iterable[str], to_remove: Iterable[str]) -> List[str]:
    removed = set(clean_image_urls(to_remove))
    return [url for url in clean_image_urls(existing) if url not in removed]
