#!/usr/bin/env python3
"""
Create DynamoDB tables in LocalStack for local development

Usage: DYNAMODB_ENDPOINT=http://localhost:4566 python scripts/create_tables_local.py
"""
import os
import sys

import boto3
from botocore.exceptions import ClientError

# Add repository root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ecolearn.config import get_settings
from ecolearn.tables import table_definitions


def create_tables():
    """Create all DynamoDB tables for the EcoLearn service"""
    settings = get_settings()

    dynamodb = boto3.client(
        'dynamodb',
        endpoint_url=settings.DYNAMODB_ENDPOINT or 'http://localhost:4566',
        region_name=settings.AWS_REGION,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID or 'test',
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or 'test'
    )

    for table_config in table_definitions(settings):
        table_name = table_config['TableName']
        try:
            dynamodb.describe_table(TableName=table_name)
            print(f"✓ Table {table_name} already exists")
        except ClientError as e:
            if e.response['Error']['Code'] == 'ResourceNotFoundException':
                dynamodb.create_table(**table_config)
                print(f"✓ Created table {table_name}")
            else:
                raise

    print("\n✅ All tables created successfully!")


if __name__ == "__main__":
    create_tables()
