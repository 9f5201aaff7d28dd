"""Product catalog API.

Account sign-up and sign-in with bearer tokens, and a product catalog whose
images live in S3-compatible object storage.
"""

__version__ = "0.1.0"
