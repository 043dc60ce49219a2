"""
Write-back Models
=================
Request models for applying externally generated file edits.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class FileModification(BaseModel):
    """A single file edit"""

    path: str = Field(..., description="Display path, e.g. <root_basename>/src/main.go")
    content: str = Field(default="", description="Full new content of the file")
    action: str = Field(..., description="update, create or delete")


class ModificationResponse(BaseModel):
    """Payload of edits to apply to the project tree"""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "modified_files": [
                    {
                        "path": "myproject/src/main.go",
                        "content": "package main\n",
                        "action": "update",
                    }
                ]
            }
        }
    )

    modified_files: List[FileModification] = Field(default_factory=list)
