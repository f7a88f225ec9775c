"""
Configuration settings for k8sexec.
"""
import os
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional


def default_kubeconfig() -> str:
    """Platform home-dir kube config path."""
    return os.path.join(os.path.expanduser("~"), ".kube", "config")


class Settings(BaseSettings):
    """Application settings from environment variables."""
    
    # Application
    APP_NAME: str = Field(default="k8sexec", description="Application name")
    
    # Kubernetes Configuration
    K8S_NAMESPACE: str = Field(default="default", description="Kubernetes namespace")
    K8S_CONTEXT: Optional[str] = Field(default=None, description="Kubernetes context")
    K8S_IN_CLUSTER: bool = Field(default=False, description="Running in cluster")
    KUBECONFIG: str = Field(default_factory=default_kubeconfig, description="Path to the kubeconfig file")
    
    # Execution Configuration
    DEFAULT_SHELL: str = Field(default="sh", description="Command used when only stdin is given")
    OUTPUT_FORMAT: str = Field(default="text", description="Output format: text|json")
    LOG_LEVEL: str = Field(default="warning", description="Log level: info|debug|warning")
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


# Global settings instance
settings = Settings()
