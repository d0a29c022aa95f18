from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import APIRouter, Response

router = APIRouter()

# Metrics Definitions
STATUS_WRITES = Counter('process_status_writes_total', 'Status documents written', ['event'])
STATUS_WRITE_FAILURES = Counter(
    'process_status_write_failures_total',
    'Status writes that could not be completed',
    ['event', 'error']
)
STATUS_READS = Counter('process_status_reads_total', 'Status document reads', ['result']) # result=hit|miss|corrupt

@router.get("/metrics")
async def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
