import pulumi
import pulumi_awsx as awsx


class Networking(pulumi.ComponentResource):
    """VPC for the EKS cluster.

    Creates:
    - VPC with DNS hostnames enabled
    - Public subnets (for load balancers)
    - Private subnets (for EKS nodes)
    - NAT gateways (one per AZ)
    """

    def __init__(
        self,
        name: str,
        vpc_cidr: str,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("scaffolder:infrastructure:Networking", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        pulumi.log.debug(f"Declaring VPC {name} with CIDR {vpc_cidr}", resource=self)

        self.vpc = awsx.ec2.Vpc(
            f"{name}-vpc",
            cidr_block=vpc_cidr,
            enable_dns_hostnames=True,
            nat_gateways=awsx.ec2.NatGatewayConfigurationArgs(
                strategy=awsx.ec2.NatGatewayStrategy.ONE_PER_AZ,
            ),
            # Role tags let the load balancer controller discover subnets
            subnet_specs=[
                awsx.ec2.SubnetSpecArgs(
                    type=awsx.ec2.SubnetType.PUBLIC,
                    tags={"kubernetes.io/role/elb": "1"},
                ),
                awsx.ec2.SubnetSpecArgs(
                    type=awsx.ec2.SubnetType.PRIVATE,
                    tags={"kubernetes.io/role/internal-elb": "1"},
                ),
            ],
            opts=child_opts,
        )

        self.vpc_id = self.vpc.vpc_id
        self.private_subnet_ids = self.vpc.private_subnet_ids
        self.public_subnet_ids = self.vpc.public_subnet_ids

        self.register_outputs(
            {
                "vpc_id": self.vpc_id,
                "private_subnet_ids": self.private_subnet_ids,
                "public_subnet_ids": self.public_subnet_ids,
            }
        )
