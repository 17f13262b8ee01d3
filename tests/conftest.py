"""
Pytest configuration and shared fixtures for Content Format Engine tests.
"""
import sys
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Generator, List

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import Settings
from content_engine.cache import ClassificationCache
from content_engine.engine import ContentFormatEngine
from content_engine.migration import ContentRecord, MigrationConfig


# ============================================================================
# Fixtures: Configuration & Settings
# ============================================================================

@pytest.fixture(scope="session")
def test_settings():
    """Settings with no inter-batch pause so migrations run fast."""
    return Settings(
        classifier_cache_size=100,
        migration_batch_size=2,
        migration_batch_delay=0.0,
        migration_enable_backup=True,
        migration_dry_run=False,
        strict_content_validation=True,
        log_level="DEBUG",
    )


@pytest.fixture
def fresh_cache() -> ClassificationCache:
    """An empty classification cache per test."""
    return ClassificationCache(max_size=100)


@pytest.fixture
def engine(test_settings, fresh_cache) -> ContentFormatEngine:
    """Engine wired around a fresh cache."""
    return ContentFormatEngine(settings=test_settings, cache=fresh_cache)


@pytest.fixture
def fast_config() -> MigrationConfig:
    return MigrationConfig(batch_size=2, batch_delay=0.0)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


# ============================================================================
# Fixtures: Sample Data
# ============================================================================

@pytest.fixture
def sample_texts():
    """Representative content in each format."""
    return {
        "html": "<p>This is <strong>bold</strong> text with {{name}} inside.</p>",
        "markdown": "# Heading\n\nSome **bold** text and a list:\n\n- one\n- two",
        "plain": "Just a simple sentence without any formatting at all.",
        "plain_with_placeholder": "Dear {{customer_name}}, your order has shipped.",
        "comparison": "Version 2.3 < 3.0 and 4.0 > 3.5 in every benchmark we ran.",
        "email": "Contact us at <support@example.com> for any questions.",
    }


@pytest.fixture
def legacy_records() -> List[ContentRecord]:
    """
    Five legacy records: plain text with a placeholder, valid markup,
    lightweight markup, mixed markup+placeholder text and an empty record.
    """
    return [
        ContentRecord(
            id="1",
            title="Plain Text Prompt",
            content="This is a plain text prompt with {{variable}} placeholder.",
            owner_id="user-1",
            created_at="2024-01-01T00:00:00Z",
            updated_at="2024-01-01T00:00:00Z",
        ),
        ContentRecord(
            id="2",
            title="HTML Prompt",
            content="<p>This is <strong>HTML</strong> content with {{variable}}.</p>",
            owner_id="user-1",
            folder_id="folder-1",
            created_at="2024-01-02T00:00:00Z",
            updated_at="2024-01-02T00:00:00Z",
        ),
        ContentRecord(
            id="3",
            title="Markdown Prompt",
            content=(
                "# Markdown Title\n\n"
                "This is **bold** and *italic* text with {{placeholder}}.\n\n"
                "- List item 1\n"
                "- List item 2\n\n"
                "Run `npm install` first."
            ),
            owner_id="user-2",
            project_id="project-1",
            tags=["docs"],
            created_at="2024-01-03T00:00:00Z",
            updated_at="2024-01-03T00:00:00Z",
        ),
        ContentRecord(
            id="4",
            title="Mixed Content",
            content="This has {{variables}} and <em>some HTML</em> but mostly plain text.",
            owner_id="user-2",
            created_at="2024-01-04T00:00:00Z",
            updated_at="2024-01-04T00:00:00Z",
        ),
        ContentRecord(
            id="5",
            title="Empty Prompt",
            content="",
            owner_id="user-3",
            created_at="2024-01-05T00:00:00Z",
            updated_at="2024-01-05T00:00:00Z",
        ),
    ]


# ============================================================================
# Session-level Setup/Teardown
# ============================================================================

def pytest_configure(config):
    """Register the markers applied below."""
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "integration: cross-component tests")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        # Auto-add 'unit' marker to test files in tests/unit/
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        # Auto-add 'integration' marker to test files in tests/integration/
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
