"""
Upload API.

Accepts a multipart upload, stores the file in S3 and records it in the
``uploads`` table. Runs behind uvicorn locally or as a Lambda via Mangum.
"""
