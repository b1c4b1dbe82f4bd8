import os
from dotenv import load_dotenv

load_dotenv()

# private key PEM for the server role; may contain escaped "\n" when pasted into .env
PRIVATE_KEY_ENV = "PRIVATE_KEY_PEM"
# optional: served by GET /api/public-key instead of deriving it from the private key
PUBLIC_KEY_PEM = os.getenv("PUBLIC_KEY_PEM", "")

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:4000").split(",")
    if o.strip()
]

# echo decrypted plaintexts back in /api/decrypt responses (demo only)
HYBRID_DEBUG = os.getenv("HYBRID_DEBUG", "").lower() in ("1", "true", "yes")
