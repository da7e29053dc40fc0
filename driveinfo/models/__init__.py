"""Data models for driveinfo."""
from driveinfo.models.disk import DEFAULT_BLOCK_SIZE, DiskDescriptor, DiskType, Interface
from driveinfo.models.report import CounterReport, DriveReport, LinkInfo

__all__ = [
    'DEFAULT_BLOCK_SIZE',
    'DiskDescriptor',
    'DiskType',
    'Interface',
    'CounterReport',
    'DriveReport',
    'LinkInfo',
]
