"""Collaborators that query the system for raw disk facts."""
from driveinfo.discovery.hwdetect import LinkDetector
from driveinfo.discovery.scanner import SystemDiscovery
from driveinfo.discovery.smartctl import SmartQuery

__all__ = ['LinkDetector', 'SmartQuery', 'SystemDiscovery']
