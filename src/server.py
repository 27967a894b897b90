#!/usr/bin/env python3
"""
HTTP handlers for failure and configuration analysis
"""

import os
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from analyzer import ConfigOptimizer, FailureAnalyzer
from config import AppConfig
from constants import SERVICE_NAME, SERVICE_VERSION
from llm_client import ModelProviderError
from models import FailureRecord


class FailureAnalysisRequest(BaseModel):
    logs: str
    error: str
    repo: str
    step: str


class EnhancedFailureAnalysisRequest(FailureAnalysisRequest):
    branch: str
    pipeline_config: Optional[str] = None


class ConfigAnalysisRequest(BaseModel):
    config: str
    analysisType: str


@lru_cache()
def get_config() -> AppConfig:
    """Configuration read once from the environment"""
    return AppConfig.from_env()


def get_failure_analyzer() -> FailureAnalyzer:
    return FailureAnalyzer.from_config(get_config())


def get_config_optimizer() -> ConfigOptimizer:
    return ConfigOptimizer.from_config(get_config())


app = FastAPI(title="Vela Insight", version=SERVICE_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())[1:])
        problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    print(f"❌ Invalid request: {problems}")
    return JSONResponse(status_code=400, content={"error": "; ".join(problems) or "Invalid request"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    print(f"❌ Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


def _failure_record(**fields) -> FailureRecord:
    """Build the record from request fields; invalid input is a 400"""
    try:
        return FailureRecord(**fields)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/analyze-failure-logs")
def analyze_failure_logs(request: FailureAnalysisRequest,
                         analyzer: FailureAnalyzer = Depends(get_failure_analyzer)):
    """Single free-text analysis of a failed step"""
    record = _failure_record(
        repository=request.repo,
        branch="",
        failing_step=request.step,
        error_message=request.error,
        log_text=request.logs,
    )
    try:
        return {"analysis": analyzer.analyze_basic(record)}
    except ModelProviderError as e:
        print(f"❌ Error in analyze-failure-logs: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        print(f"❌ Error in analyze-failure-logs: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/enhanced-failure-analysis")
def enhanced_failure_analysis(request: EnhancedFailureAnalysisRequest,
                              analyzer: FailureAnalyzer = Depends(get_failure_analyzer)):
    """Docs-grounded analysis split into named sections"""
    record = _failure_record(
        repository=request.repo,
        branch=request.branch,
        failing_step=request.step,
        error_message=request.error,
        log_text=request.logs,
        pipeline_config=request.pipeline_config,
    )
    try:
        return analyzer.analyze_enhanced(record).to_dict()
    except Exception as e:
        print(f"❌ Error in enhanced-failure-analysis: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/analyze-vela-config")
def analyze_vela_config(request: ConfigAnalysisRequest,
                        optimizer: ConfigOptimizer = Depends(get_config_optimizer)):
    """Review (analyze) or rewrite (optimize) a .vela.yml"""
    try:
        return {"result": optimizer.run(request.config, request.analysisType)}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ModelProviderError as e:
        print(f"❌ Error in analyze-vela-config: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        print(f"❌ Error in analyze-vela-config: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/health")
def health(config: AppConfig = Depends(get_config)):
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "provider": config.failure_provider.display_name,
        "credentialConfigured": config.failure_provider.has_credential,
    }


def main():
    """Serve the API with uvicorn"""
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    print(f"🚀 Starting {SERVICE_NAME} on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
