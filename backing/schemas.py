"""Pydantic schemas for WebHDFS JSON responses."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class WebHdfsFileStatus(BaseModel):
    """A FileStatus object as returned by GETFILESTATUS and LISTSTATUS."""
    model_config = ConfigDict(populate_by_name=True)

    access_time: int = Field(0, alias="accessTime")
    block_size: int = Field(0, alias="blockSize")
    group: str = ""
    length: int = 0
    modification_time: int = Field(0, alias="modificationTime")
    owner: str = ""
    path_suffix: str = Field("", alias="pathSuffix")
    permission: str = ""
    replication: int = 0
    type: str = "FILE"


class FileStatusResponse(BaseModel):
    """Response model for GETFILESTATUS."""
    file_status: WebHdfsFileStatus = Field(alias="FileStatus")


class FileStatusList(BaseModel):
    file_status: List[WebHdfsFileStatus] = Field(default_factory=list, alias="FileStatus")


class ListStatusResponse(BaseModel):
    """Response model for LISTSTATUS."""
    file_statuses: FileStatusList = Field(alias="FileStatuses")


class WebHdfsBlockLocation(BaseModel):
    """One block of a file with the datanodes holding it."""
    hosts: List[str] = Field(default_factory=list)
    names: List[str] = Field(default_factory=list)
    offset: int = 0
    length: int = 0
    corrupt: bool = False


class BlockLocationList(BaseModel):
    block_location: List[WebHdfsBlockLocation] = Field(default_factory=list, alias="BlockLocation")


class BlockLocationsResponse(BaseModel):
    """Response model for GETFILEBLOCKLOCATIONS."""
    block_locations: BlockLocationList = Field(alias="BlockLocations")


class BooleanResponse(BaseModel):
    """Response model for DELETE, MKDIRS and RENAME."""
    boolean: bool


class RemoteExceptionBody(BaseModel):
    exception: str = ""
    java_class_name: Optional[str] = Field(None, alias="javaClassName")
    message: str = ""


class RemoteExceptionResponse(BaseModel):
    """Error body returned by the namenode."""
    remote_exception: RemoteExceptionBody = Field(alias="RemoteException")
