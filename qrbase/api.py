#!/usr/bin/env python3
"""
REST API for qrbase

FastAPI service that exposes the base43/base44 codecs to web clients,
e.g. a page that renders QR codes or builds short URLs from binary data.

Endpoints:
    GET  /api/health     - Service health
    GET  /api/alphabets  - Alphabet tables
    POST /api/encode     - Encode hex bytes (byte-pair or fixed bit width)
    POST /api/decode     - Decode a string back to hex bytes

Errors:
    400: Malformed request data (bad hex, unknown alphabet, bit count out
         of range, payload too large)
    422: Decode failure; detail = {"kind", "message", "position"}

Usage:
    from qrbase.api import create_api, run_api_server
    from qrbase.config import CodecConfig

    app = create_api(CodecConfig(alphabet=44))
    run_api_server(app, host="0.0.0.0", port=8080)
"""

import logging
from datetime import datetime
from typing import List, Optional

try:
    from fastapi import FastAPI, HTTPException
    from fastapi.middleware.cors import CORSMiddleware
    from pydantic import BaseModel, Field
except ImportError:
    raise ImportError(
        "FastAPI and Pydantic are required for the API module.\n"
        "Install with: pip3 install fastapi uvicorn pydantic"
    )

from . import __version__
from .codec import CODECS, Codec, get_codec
from .config import CodecConfig
from .errors import CodecError


# =============================================================================
# Constants
# =============================================================================

# Largest payload accepted by /api/encode and produced by /api/decode
MAX_PAYLOAD_BYTES = 4096

# Longest string accepted by /api/decode
MAX_ENCODED_CHARS = (3 * MAX_PAYLOAD_BYTES + 1) // 2


# =============================================================================
# Pydantic Models
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    timestamp: str = Field(..., description="Current server time (ISO 8601)")
    version: str = Field(..., description="qrbase version")
    default_alphabet: int = Field(..., description="Alphabet used when a request names none")


class AlphabetResponse(BaseModel):
    """One alphabet table."""
    name: str = Field(..., description="Alphabet name")
    base: int = Field(..., description="Number of digits")
    chars: str = Field(..., description="Characters in digit order")


class AlphabetListResponse(BaseModel):
    """All supported alphabets."""
    alphabets: List[AlphabetResponse]


class EncodeRequest(BaseModel):
    """Encode request."""
    alphabet: Optional[int] = Field(None, description="43 or 44 (default: server config)")
    data_hex: str = Field(..., description="Payload as hex")
    bits: Optional[int] = Field(None, description="Fixed bit width 1-128 (little-endian payload)")


class EncodeResponse(BaseModel):
    """Encode result."""
    alphabet: str
    encoded: str
    length: int


class DecodeRequest(BaseModel):
    """Decode request."""
    alphabet: Optional[int] = Field(None, description="43 or 44 (default: server config)")
    encoded: str = Field(..., description="Encoded string")
    bits: Optional[int] = Field(None, description="Fixed bit width 1-128")


class DecodeResponse(BaseModel):
    """Decode result."""
    alphabet: str
    data_hex: str
    length: int


# =============================================================================
# API Factory
# =============================================================================

def create_api(config: Optional[CodecConfig] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Front-end configuration; supplies the default alphabet.

    Returns:
        FastAPI application instance.
    """
    app = FastAPI(
        title="qrbase API",
        description="QR-compatible base43/base44 encoding of binary data",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # Add CORS middleware for web access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config or CodecConfig()
    logger = logging.getLogger("API")

    # -------------------------------------------------------------------------
    # Helper Functions
    # -------------------------------------------------------------------------

    def resolve_codec(alphabet: Optional[int]) -> Codec:
        """Pick the requested codec or the configured default."""
        try:
            return get_codec(app.state.config.alphabet if alphabet is None else alphabet)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    def decode_error(codec: Codec, error: CodecError) -> HTTPException:
        """Convert a CodecError to a 422 response."""
        logger.debug(f"{codec.name} decode failed: {error}")
        return HTTPException(
            status_code=422,
            detail={
                "kind": error.kind.value,
                "message": str(error),
                "position": error.position,
            },
        )

    # -------------------------------------------------------------------------
    # Info Endpoints
    # -------------------------------------------------------------------------

    @app.get("/api/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Check API health."""
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now().isoformat(),
            version=__version__,
            default_alphabet=app.state.config.alphabet,
        )

    @app.get("/api/alphabets", response_model=AlphabetListResponse, tags=["Codec"])
    async def list_alphabets():
        """List the supported alphabet tables."""
        return AlphabetListResponse(
            alphabets=[
                AlphabetResponse(name=codec.name, base=codec.base, chars=codec.alphabet.chars)
                for codec in CODECS.values()
            ]
        )

    # -------------------------------------------------------------------------
    # Codec Endpoints
    # -------------------------------------------------------------------------

    @app.post("/api/encode", response_model=EncodeResponse, tags=["Codec"])
    async def encode(request: EncodeRequest):
        """
        Encode a payload.

        Without `bits` the byte-pair codec is used; with `bits` the payload
        is treated as a little-endian integer of that width.
        """
        codec = resolve_codec(request.alphabet)

        try:
            data = bytes.fromhex(request.data_hex)
        except ValueError:
            raise HTTPException(status_code=400, detail="data_hex is not valid hex")
        if len(data) > MAX_PAYLOAD_BYTES:
            raise HTTPException(
                status_code=400,
                detail=f"Payload too large: {len(data)} > {MAX_PAYLOAD_BYTES} bytes",
            )

        try:
            if request.bits is None:
                encoded = codec.encode(data)
            else:
                encoded = codec.encode_bits(request.bits, data)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        return EncodeResponse(alphabet=codec.name, encoded=encoded, length=len(encoded))

    @app.post("/api/decode", response_model=DecodeResponse, tags=["Codec"])
    async def decode(request: DecodeRequest):
        """Decode a string produced by /api/encode."""
        codec = resolve_codec(request.alphabet)

        if len(request.encoded) > MAX_ENCODED_CHARS:
            raise HTTPException(
                status_code=400,
                detail=f"Encoded string too long: {len(request.encoded)} > {MAX_ENCODED_CHARS} chars",
            )

        try:
            if request.bits is None:
                data = codec.decode(request.encoded)
            else:
                data = codec.decode_bits(request.bits, request.encoded)
        except CodecError as e:
            raise decode_error(codec, e)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        return DecodeResponse(alphabet=codec.name, data_hex=data.hex(), length=len(data))

    return app


# =============================================================================
# Server Runner
# =============================================================================

def run_api_server(
    app: FastAPI,
    host: str = "0.0.0.0",
    port: int = 8080,
    log_level: str = "info",
):
    """
    Run the API server (blocking).

    Args:
        app: FastAPI application instance.
        host: Host to bind to.
        port: Port to bind to.
        log_level: Logging level.
    """
    try:
        import uvicorn
    except ImportError:
        raise ImportError("uvicorn is required. Install with: pip3 install uvicorn")

    uvicorn.run(app, host=host, port=port, log_level=log_level)
