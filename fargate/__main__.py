"""Fargate - web service on ECS behind an application load balancer."""

import pulumi

from scaffolder.components.fargate import FargateWebService
from scaffolder.config import load_service_config

service_config = load_service_config()

web = FargateWebService("web", service=service_config)

# Export the URL so we can easily access it.
pulumi.export("frontendURL", web.frontend_url)
