import sys
from dataclasses import dataclass
from pathlib import Path

import pytest

# Garante que src esteja no path (imports "shared.*" como no pacote da Lambda)
_root = Path(__file__).resolve().parents[1]
src_path = str(_root / "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)


@dataclass
class FakeLambdaContext:
    function_name: str = "checkout-session"
    memory_limit_in_mb: int = 128
    invoked_function_arn: str = "arn:aws:lambda:ap-northeast-1:123456789012:function:checkout-session"
    aws_request_id: str = "da658bd3-2d6f-4e7b-8ec2-937234644fdc"


@pytest.fixture
def lambda_context() -> FakeLambdaContext:
    return FakeLambdaContext()
