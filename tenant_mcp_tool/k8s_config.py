"""Kubernetes client construction.

Clients are built per call from the kubeconfig (or the in-cluster service
account when running inside a pod). Nothing is cached here so a context
switch or token rotation is picked up by the next tool call.
"""

import logging
import os
from typing import Optional

from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from kubernetes.dynamic import DynamicClient

from tenant_mcp_tool import config

logger = logging.getLogger("mcp-server")


def _in_cluster() -> bool:
    return bool(os.environ.get("KUBERNETES_SERVICE_HOST"))


def get_api_client(context: Optional[str] = None) -> k8s_client.ApiClient:
    """Return an ApiClient for the given kubeconfig context.

    An empty context means the kubeconfig's current context. Inside a pod
    with no explicit context the service account credentials are used.
    """
    if not context and _in_cluster():
        logger.debug("Loading in-cluster Kubernetes configuration")
        configuration = k8s_client.Configuration()
        k8s_config.load_incluster_config(client_configuration=configuration)
        return k8s_client.ApiClient(configuration)

    logger.debug(f"Loading kubeconfig (context={context or 'current'})")
    return k8s_config.new_client_from_config(
        config_file=config.settings.kubeconfig,
        context=context or None,
    )


def get_apiextensions_client(context: Optional[str] = None) -> k8s_client.ApiextensionsV1Api:
    return k8s_client.ApiextensionsV1Api(get_api_client(context))


def get_dynamic_client(context: Optional[str] = None) -> DynamicClient:
    return DynamicClient(get_api_client(context))
