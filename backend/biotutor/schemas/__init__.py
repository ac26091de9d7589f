"""
Pydantic request/response schemas for the BioTutor API.
"""
