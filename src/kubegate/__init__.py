# src/kubegate/__init__.py
"""
kubegate validates EKS Anywhere cluster manifests for Nutanix before they are applied.
"""

__version__ = "0.3.0"
