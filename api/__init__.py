"""
Provenance Anchor HTTP API (FastAPI)

- POST /api/v1/<stage>   - Anchor a custody-chain stage record
- POST /api/v1/ai/verify - Verify a commit-reveal pair
- /api/v1/ipfs/...       - Raw content passthrough
- GET /health            - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
