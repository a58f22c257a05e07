# handler.py
"""AWS Lambda handler using Mangum adapter for FastAPI.

This module provides the entry point for AWS Lambda to invoke
the portfolio API. Mangum translates API Gateway events to ASGI
and passes the Lambda context along as scope["aws.context"].
"""

from mangum import Mangum
from portfolio_api.main import app

# lifespan="off" disables ASGI lifespan events which aren't needed in Lambda
handler = Mangum(app, lifespan="off")
