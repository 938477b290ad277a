import pulumi
import pulumi_aws as aws
import pulumi_awsx as awsx

from scaffolder.models import FargateServiceConfig


class FargateWebService(pulumi.ComponentResource):
    """Single-container Fargate service behind an application load balancer.

    Creates:
    - ECS cluster
    - Application load balancer with a default target group
    - Fargate service with a public IP, registered in that target group
    """

    def __init__(
        self,
        name: str,
        service: FargateServiceConfig,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("scaffolder:infrastructure:FargateWebService", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.cluster = aws.ecs.Cluster(f"{name}-cluster", opts=child_opts)

        self.load_balancer = awsx.lb.ApplicationLoadBalancer(f"{name}-lb", opts=child_opts)

        pulumi.log.debug(
            f"Fargate container {service.image} ({service.cpu} CPU, {service.memory} MiB) "
            f"on port {service.container_port}",
            resource=self,
        )

        self.service = awsx.ecs.FargateService(
            f"{name}-service",
            cluster=self.cluster.arn,
            assign_public_ip=True,
            task_definition_args=awsx.ecs.FargateServiceTaskDefinitionArgs(
                container=awsx.ecs.TaskDefinitionContainerDefinitionArgs(
                    name="awsx-ecs",
                    image=service.image,
                    cpu=service.cpu,
                    memory=service.memory,
                    essential=True,
                    port_mappings=[
                        awsx.ecs.TaskDefinitionPortMappingArgs(
                            container_port=service.container_port,
                            target_group=self.load_balancer.default_target_group,
                        )
                    ],
                ),
            ),
            opts=child_opts,
        )

        self.frontend_url = pulumi.Output.concat(
            "http://", self.load_balancer.load_balancer.dns_name
        )

        self.register_outputs({"frontend_url": self.frontend_url})
