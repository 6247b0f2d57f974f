"""Heketi REST manager client."""

from glustervol.heketi.client import HeketiClient
from glustervol.heketi.poller import AsyncOperationPoller, OperationState
from glustervol.heketi.signer import RequestSigner, compute_qsh

__all__ = [
    "HeketiClient",
    "AsyncOperationPoller",
    "OperationState",
    "RequestSigner",
    "compute_qsh",
]
