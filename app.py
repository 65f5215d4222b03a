#!/usr/bin/env python3
"""
WasedaTime serverless backend CDK App
Lambda function groups with least-privilege roles, status relays and Amplify frontends.
"""

import aws_cdk as cdk

# Deployment description
from infrastructure.core.description import build_deployment_description

# Stacks
from infrastructure.stacks.backend_stack import BackendStack
from infrastructure.stacks.frontend_stack import FrontendStack

# Configuration
from infrastructure.config.environments import get_environment_config
from infrastructure.config.settings import DeploymentSettings

app = cdk.App()

# Get environment configuration
environment = app.node.try_get_context("environment") or "dev"
config = get_environment_config(environment)

# Named secrets are captured once; nothing below reads the process environment again
settings = DeploymentSettings.from_env()

# CDK environment (account/region)
cdk_env = cdk.Environment(
    account=settings.aws_account_id or config.get("account_id"),
    region=settings.aws_region or config.get("region", "ap-northeast-1"),
)

stack_prefix = f"WasedaTime-{environment}"

# Fully resolved before any stack is created
description = build_deployment_description(environment, config, settings)

# ========================================
# BACKEND LAYER
# ========================================

backend_stack = BackendStack(
    app,
    f"{stack_prefix}-Backend",
    environment=environment,
    config=config,
    deployment=description,
    env=cdk_env,
)

# ========================================
# FRONTEND LAYER
# ========================================

frontend_stack = FrontendStack(
    app,
    f"{stack_prefix}-Frontend",
    environment=environment,
    config=config,
    deployment=description,
    settings=settings,
    env=cdk_env,
)

# ========================================
# TAGGING STRATEGY
# ========================================

for key, value in config.get("tags", {}).items():
    cdk.Tags.of(app).add(key, value)
cdk.Tags.of(app).add("ManagedBy", "CDK")

cdk.Tags.of(backend_stack).add("Layer", "Backend")
cdk.Tags.of(frontend_stack).add("Layer", "Frontend")

app.synth()
