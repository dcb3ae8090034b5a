"""Face comparison for attendance verification.

This is a character-sampling heuristic over the base64 payloads with random
variance added, not biometric matching. It exists so the verification flow
can run end to end.
"""
import os
import re
from typing import Optional, Tuple

import numpy as np

DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")
BASE64_PATTERN = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")
MIN_IMAGE_LENGTH = 1000
MAX_SAMPLES = 100
VARIANCE = 10.0

MATCH_THRESHOLD = float(os.environ.get("FACE_MATCH_THRESHOLD", 75))


def strip_data_url(image_base64: str) -> str:
    return DATA_URL_PREFIX.sub("", image_base64)


def similarity(image1_base64: str, image2_base64: str, rng: Optional[np.random.Generator] = None) -> float:
    """Similarity score between 0 and 100."""
    clean1 = strip_data_url(image1_base64)
    clean2 = strip_data_url(image2_base64)
    if not clean1 or not clean2:
        return 0.0

    length_ratio = min(len(clean1), len(clean2)) / max(len(clean1), len(clean2))

    sample_size = min(MAX_SAMPLES, len(clean1), len(clean2))
    step1 = len(clean1) // sample_size
    step2 = len(clean2) // sample_size
    matching = sum(1 for i in range(sample_size) if clean1[i * step1] == clean2[i * step2])
    char_similarity = matching / sample_size

    score = (length_ratio * 0.3 + char_similarity * 0.7) * 100

    rng = rng if rng is not None else np.random.default_rng()
    score += float(rng.uniform(-VARIANCE, VARIANCE))
    return max(0.0, min(100.0, score))


def compare_faces(
    stored_base64: str,
    captured_base64: str,
    rng: Optional[np.random.Generator] = None,
    threshold: float = MATCH_THRESHOLD,
) -> Tuple[bool, float]:
    """Return (match, confidence)"""
    if not stored_base64 or not captured_base64:
        return False, 0.0
    score = similarity(stored_base64, captured_base64, rng)
    return score >= threshold, round(score, 1)


def validate_face_image(image_base64: str) -> Optional[str]:
    """Return an error message, or None when the payload looks like an image."""
    if not image_base64 or not isinstance(image_base64, str):
        return "Image data is required"
    clean = strip_data_url(image_base64)
    if not BASE64_PATTERN.match(clean):
        return "Invalid base64 format"
    if len(clean) < MIN_IMAGE_LENGTH:
        return "Image is too small"
    return None
