# src/infrastructure/sample_data.py
# Stand-in for the application's real data source: pages, images and videos
# that the repositories turn into search records.

from dataclasses import dataclass
from typing import List, Optional, Union


@dataclass(frozen=True)
class DefaultPage:
    id: int
    title: str
    content: str


@dataclass(frozen=True)
class LocalizedPage:
    id: int
    title: str
    content: str
    locale: str


@dataclass(frozen=True)
class Image:
    title: str
    author: str
    description: Optional[str] = None
    caption: Optional[str] = None


@dataclass(frozen=True)
class Video:
    title: str
    author: str
    length: float
    description: Optional[str] = None
    transcript: Optional[str] = None


Page = Union[DefaultPage, LocalizedPage]


class DataRepository:

    def get_pages(self) -> List[Page]:
        return [
            DefaultPage(1, "Welcome to RealWorld",
                        "An introduction to the RealWorld example application and its features."),
            DefaultPage(2, "Getting Started",
                        "Step-by-step guide to set up the project locally and run the test suite."),
            DefaultPage(3, "API Overview",
                        "High-level overview of the public API endpoints and authentication flow."),
            LocalizedPage(1, "Über RealWorld",
                          "Eine kurze Einführung in die RealWorld Beispielanwendung und ihre Funktionen.",
                          locale="de"),
            DefaultPage(4, "Contributing",
                        "How to contribute code, write tests and follow the project guidelines."),
            DefaultPage(5, "Changelog",
                        "Recent changes, releases and notable bug fixes in the project."),
            LocalizedPage(2, "Getting Started (EN)",
                          "Quickstart and common troubleshooting hints in English.",
                          locale="en"),
            DefaultPage(6, "Architecture",
                        "Description of the system architecture, modules and data flow."),
            LocalizedPage(3, "Erste Schritte (DE)",
                          "Kurzinfo zum schnellen Einstieg und zur Fehlerbehebung auf Deutsch.",
                          locale="de"),
        ]

    def get_images(self) -> List[Image]:
        return [
            Image("Sunset over the Bay", "A. Rivera",
                  description="Golden hour over the city bay with reflections on the water.",
                  caption="Sunset skyline"),
            Image("Mountain Trail", "J. Kim",
                  description="A winding trail through alpine meadows in summer.",
                  caption="Hiking route"),
            Image("City Night Lights", "L. Müller",
                  description="Long exposure capturing car trails and illuminated skyscrapers.",
                  caption="Urban night"),
            Image("Autumn Leaves", "S. Patel",
                  description="Close-up of colorful maples with morning dew.",
                  caption="Fall foliage"),
            Image("Product Flatlay", "M. Rossi",
                  description="Minimal product composition used for marketing mockups.",
                  caption="E-commerce mockup"),
            Image("Portrait: The Gardener", "D. Lopez",
                  description="Environmental portrait of a gardener arranging plants.",
                  caption="Portrait session"),
            Image("Desert Dunes", "E. Okoro",
                  description="Windswept patterns on sand dunes under a clear sky."),
            Image("Coffee & Code", "R. Singh", caption="Workspace vibes"),
            Image("Harbor Morning", "N. Ivanov",
                  description="Fisherboats anchored at sunrise with mist on the water.",
                  caption="Morning calm"),
            Image("Macro: Bee on Flower", "K. Yamamoto",
                  description="Detailed shot of a bee collecting nectar from a blossom.",
                  caption="Nature close-up"),
        ]

    def get_videos(self) -> List[Video]:
        return [
            Video("Intro to RealWorld", "Core Team", 4.2,
                  description="A short walkthrough covering the goals of the RealWorld project.",
                  transcript="Welcome to RealWorld. In this video we introduce the project..."),
            Video("Setting Up the Dev Environment", "Contributor Docs", 9.5,
                  description="Guide to install dependencies and run the development server.",
                  transcript="First, clone the repository. Then install dependencies..."),
            Video("API Authentication Explained", "Auth Specialist", 12.0,
                  description="Deep dive into token-based authentication used by the API.",
                  transcript="Authentication relies on JWT tokens issued at login..."),
            Video("Testing Best Practices", "QA Team", 15.3,
                  description="Recommendations for writing reliable unit and integration tests.",
                  transcript="Start by isolating units of code and mocking external services..."),
            Video("Deploying to Production", "Ops Team", 11.1,
                  description="Steps for preparing a release and deploying safely to production.",
                  transcript="Make sure migrations are tested and backups are available..."),
            Video("Localisation Basics", "I18n Lead", 7.4,
                  description="How localization is structured in the codebase and content handling.",
                  transcript="Use locale-specific page variants and translation keys..."),
            Video("Performance Tuning Tips", "Performance Team", 10.7,
                  description="Common optimizations for database and HTTP request handling.",
                  transcript="Analyze slow queries and add indexes where appropriate..."),
            Video("Design System Overview", "UX Team", 6.8,
                  description="Introduction to reusable components and styling conventions.",
                  transcript="Components are documented and versioned for consistent use..."),
            Video("Accessibility Considerations", "A11y Advocate", 8.9,
                  transcript="Use semantic HTML, proper labels and keyboard navigation..."),
            Video("Contributing Workflow", "Maintainer", 5.6,
                  description="How to prepare a contribution, from issue to pull request."),
        ]
