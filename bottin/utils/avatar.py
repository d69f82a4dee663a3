# bottin/utils/avatar.py
import random
from typing import Optional

# Images servies par le frontend sous /default-profile-images/
DEFAULT_PROFILE_IMAGES = ("bottin1.jpg", "bottin2.jpg", "bottin3.jpg", "bottin4.jpg")


def default_profile_image_url(image_name: Optional[str] = None) -> str:
    name = image_name or random.choice(DEFAULT_PROFILE_IMAGES)
    return f"/default-profile-images/{name}"
