# Pydantic request/response and recognizer payload schemas
