"""Frontend stack: one Amplify app and branch per managed application."""

import json
from typing import Dict, List, Optional

from aws_cdk import CfnOutput, CfnTag, Stack, aws_amplify as amplify
from constructs import Construct

from infrastructure.config.settings import DeploymentSettings
from infrastructure.config.types import EnvironmentConfig
from infrastructure.core.build_spec import FRONTEND_APPS, BuildMode, BuildSpecification
from infrastructure.core.description import DeploymentDescription

GITHUB_OAUTH_TOKEN = "GITHUB_OAUTH_TOKEN"
WEBSITE_DEV_PASS = "WEBSITE_DEV_PASS"
DEPLOY_KEY = "DEPLOY_KEY"


class FrontendStack(Stack):
    """Amplify hosting for the micro-apps, the main web app and the API docs site."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        environment: str,
        config: EnvironmentConfig,
        deployment: DeploymentDescription,
        settings: DeploymentSettings,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.env_name = environment
        self.config = config
        self.settings = settings

        # Resolve every credential before creating any resource.
        self.oauth_token = settings.require("frontend", GITHUB_OAUTH_TOKEN)[GITHUB_OAUTH_TOKEN]
        self.basic_auth = self._basic_auth_config()
        self.deploy_key: Optional[str] = None
        if any(FRONTEND_APPS[spec.app_name].syncs_submodules for spec in deployment.build_specs):
            self.deploy_key = settings.require("frontend", DEPLOY_KEY)[DEPLOY_KEY]

        self.apps: Dict[str, amplify.CfnApp] = {}
        self.branches: Dict[str, amplify.CfnBranch] = {}
        for spec in deployment.build_specs:
            self._create_app(spec)

    def _basic_auth_config(self) -> Optional[amplify.CfnApp.BasicAuthConfigProperty]:
        if not self.config.get("enable_basic_auth", False):
            return None
        password = self.settings.require("frontend", WEBSITE_DEV_PASS)[WEBSITE_DEV_PASS]
        return amplify.CfnApp.BasicAuthConfigProperty(
            enable_basic_auth=True,
            username=self.config.get("basic_auth_username", "wasedatime"),
            password=password,
        )

    def _environment_variables(self, app_name: str) -> List[amplify.CfnApp.EnvironmentVariableProperty]:
        variables = [amplify.CfnApp.EnvironmentVariableProperty(name="STAGE", value=self.env_name)]
        if FRONTEND_APPS[app_name].syncs_submodules:
            variables.append(amplify.CfnApp.EnvironmentVariableProperty(name=DEPLOY_KEY, value=self.deploy_key))
        return variables

    def _create_app(self, spec: BuildSpecification) -> None:
        frontend_app = FRONTEND_APPS[spec.app_name]
        repository = f"{self.config.get('repository_owner_url', 'https://github.com/wasedatime')}/{frontend_app.repository}"

        app = amplify.CfnApp(
            self,
            f"{spec.app_name}-app",
            name=f"wasedatime-{spec.app_name}-{self.env_name}",
            repository=repository,
            oauth_token=self.oauth_token,
            build_spec=json.dumps(spec.to_amplify_dict(), indent=2),
            basic_auth_config=self.basic_auth,
            environment_variables=self._environment_variables(spec.app_name),
            tags=[CfnTag(key="BuildMode", value=spec.mode.value)],
        )
        branch = amplify.CfnBranch(
            self,
            f"{spec.app_name}-branch",
            app_id=app.attr_app_id,
            branch_name=self.config.get("frontend_branch", "main"),
            enable_auto_build=True,
            stage="PRODUCTION" if spec.mode is BuildMode.PRODUCTION else "DEVELOPMENT",
        )

        self.apps[spec.app_name] = app
        self.branches[spec.app_name] = branch
        CfnOutput(self, f"{spec.app_name}-default-domain", value=app.attr_default_domain)
