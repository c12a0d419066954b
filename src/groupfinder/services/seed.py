"""Example communities shown alongside approved submissions."""

from groupfinder.models.submission import JoinType
from groupfinder.schemas.community import LiveCommunity


def _seed(**fields: object) -> LiveCommunity:
    category = str(fields["category"])
    platform = str(fields["platform"])
    fields.setdefault("tags", (category, platform))
    fields.setdefault("long_description", fields["description"])
    return LiveCommunity(source="seed", **fields)  # type: ignore[arg-type]


SEED_COMMUNITIES: tuple[LiveCommunity, ...] = (
    _seed(
        id="startup-founders-network",
        name="Startup Founders Network",
        description="Connect with other startup founders to share ideas, resources, and support.",
        platform="WhatsApp",
        category="Startups",
        member_count=3500,
        founder_name="Sarah Johnson",
        founder_bio="Founded 3 startups with 2 exits. Angel investor and startup mentor.",
        join_link="https://chat.whatsapp.com/invite/startupfounders2024",
    ),
    _seed(
        id="startups-dealflow-club",
        name="Startups Dealflow Club",
        description="Curated startup opportunities, intros, and weekly dealflow discussions.",
        platform="WhatsApp",
        category="Startups",
        member_count=1200,
        join_type=JoinType.PAID,
        price_inr=29,
    ),
    _seed(
        id="startup-operators-circle",
        name="Startup Operators Circle",
        description="Practical playbooks for growth, hiring, and ops from builders.",
        platform="WhatsApp",
        category="Startups",
        member_count=2400,
        location="India",
        join_type=JoinType.PAID,
        price_inr=49,
    ),
    _seed(
        id="design-systems-slack",
        name="Design Systems Slack",
        description="Community for designers and developers working with design systems.",
        platform="Slack",
        category="Creative",
        member_count=12000,
        join_link="https://designsystemscommunity.slack.com/join/shared_invite/design-systems-2024",
    ),
    _seed(
        id="ai-engineers-hub",
        name="AI Engineers Hub",
        description="Technical discussions on machine learning, deep learning, and AI engineering.",
        platform="Discord",
        category="Tech",
        member_count=8700,
        join_link="https://discord.gg/aiengineers2024",
    ),
    _seed(
        id="crypto-investors-circle",
        name="Crypto Investors Circle",
        description="Analysis, insights and discussion for serious cryptocurrency investors.",
        platform="Telegram",
        category="Finance",
        member_count=5200,
        join_link="https://t.me/cryptoinvestorscircle",
    ),
    _seed(
        id="content-creators-collective",
        name="Content Creators Collective",
        description="Support network for YouTubers, podcasters, and digital content creators.",
        platform="WhatsApp",
        category="Creators",
        member_count=2800,
        location="United States",
        join_link="https://chat.whatsapp.com/invite/contentcreators2024",
    ),
    _seed(
        id="product-managers-united",
        name="Product Managers United",
        description="Community for product managers to share insights and best practices.",
        platform="Slack",
        category="Business",
        member_count=7300,
        join_link="https://pmunited.slack.com/join/shared_invite/product-managers-2024",
    ),
)
