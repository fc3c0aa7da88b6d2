"""
Prompt templates offered to users as starting points.
"""
from typing import Dict, List


PROMPT_TEMPLATES: Dict[str, Dict[str, str]] = {
    "static-website": {
        "description": "Create a static website with S3 hosting, CloudFront CDN, and custom domain support",
        "prompt": (
            "Create a static website with S3 bucket hosting, CloudFront distribution for global CDN, "
            "Route53 for DNS, and SSL certificate for secure HTTPS access"
        ),
    },
    "web-app": {
        "description": "Full-stack web application with load balancer, auto-scaling, and database",
        "prompt": (
            "Create a scalable web application with Application Load Balancer, Auto Scaling Group "
            "of EC2 instances, RDS MySQL database, and VPC with public and private subnets"
        ),
    },
    "database": {
        "description": "Secure database setup with backup, encryption, and monitoring",
        "prompt": (
            "Create a secure RDS database with Multi-AZ deployment, automated backups, encryption "
            "at rest, VPC with private subnets, security groups, and CloudWatch monitoring"
        ),
    },
    "serverless": {
        "description": "Serverless API with Lambda, API Gateway, and DynamoDB",
        "prompt": (
            "Create a serverless REST API using API Gateway, Lambda functions, DynamoDB tables, "
            "IAM roles, and CloudWatch logs for a complete serverless architecture"
        ),
    },
    "vpc-network": {
        "description": "Complete VPC network with public/private subnets and security",
        "prompt": (
            "Create a complete VPC network with public and private subnets across multiple AZs, "
            "Internet Gateway, NAT Gateway, Route Tables, Network ACLs, and Security Groups"
        ),
    },
    "load-balancer": {
        "description": "Application Load Balancer with target groups and health checks",
        "prompt": (
            "Create an Application Load Balancer with target groups, health checks, SSL "
            "termination, multiple availability zones, and auto-scaling integration"
        ),
    },
    "container": {
        "description": "Containerized application with ECS, ECR, and service discovery",
        "prompt": (
            "Create a containerized application using ECS Fargate, ECR repository, Application "
            "Load Balancer, service discovery, and CloudWatch logging"
        ),
    },
    "data-pipeline": {
        "description": "Data processing pipeline with S3, Lambda, and analytics",
        "prompt": (
            "Create a data processing pipeline with S3 buckets, Lambda functions for processing, "
            "SQS queues, DynamoDB for metadata, and CloudWatch for monitoring"
        ),
    },
}


def list_templates() -> List[Dict[str, str]]:
    """Templates as a list, each with its key."""
    return [{"key": key, **template} for key, template in PROMPT_TEMPLATES.items()]
