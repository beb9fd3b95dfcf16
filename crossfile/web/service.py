from __future__ import annotations
from pathlib import Path
from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from crossfile.analysis.runner import run_analysis
from crossfile.core.errors import BudgetExceeded, InvalidInput
from crossfile.presets import load_rules, merge_rules
from crossfile.reporting.schema import AnalyzeRequest, to_payload
from crossfile.utils.logging_config import get_logger

logger = get_logger(__name__)

RULES_PATH = Path("presets/rules.yaml")

app = FastAPI(title="crossfile analysis service")


@app.get("/api/health")
def api_health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/api/analyze")
def api_analyze(req: AnalyzeRequest) -> Any:
    rules = merge_rules(load_rules(RULES_PATH), req.rules)
    files = [f.model_dump() for f in req.files]
    try:
        result = run_analysis(files, rules=rules, raise_on_budget=True)
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))
    except BudgetExceeded as e:
        logger.warning("Request exceeded analysis budget: %s", e.reason)
        return JSONResponse(
            status_code=413,
            content={"detail": e.reason, "partial": to_payload(e.partial) if e.partial is not None else None},
        )
    return to_payload(result)
