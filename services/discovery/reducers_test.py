"""Tests for the stage reducers."""

from lib.owner_discovery.models import (
    AddressRecord,
    ContactRecord,
    ContactSearchResult,
    DomainScrapeRecord,
    MapsRecord,
    ReviewSiteRecord,
    ScrapedEmail,
    ScrapedOwner,
)
from services.discovery.models import EmailSource, HospitalityEmail, OwnerSource
from services.discovery.reducers import (
    absorb_contacts,
    absorb_domain_scrape,
    absorb_email,
    absorb_maps,
    absorb_review_site,
    absorb_verified_mailbox,
    initial_state,
    mark_stage,
    price_from_level,
)


def _yelp(**kwargs):
    defaults = dict(
        url="https://www.yelp.com/biz/blue-door-cafe-austin",
        owner_name="Maria Lopez",
        owner_title="Owner",
        phone="(512) 555-0100",
        website="https://www.bluedoorcafe.com/",
        rating=4.5,
        review_count=312,
        price_range="$$",
        address=AddressRecord(street="1200 S Lamar Blvd", city="Austin", state="TX", zip="78704"),
    )
    defaults.update(kwargs)
    return ReviewSiteRecord(**defaults)


class TestInitialState:

    def test_seeds_from_input(self):
        state = initial_state("Blue Door Cafe", "Austin", "TX", "https://www.bluedoorcafe.com/menu")
        assert state.domain == "bluedoorcafe.com"
        assert state.business_info.website == "https://www.bluedoorcafe.com/menu"
        assert state.business_info.address.city == "Austin"
        assert state.business_info.address.state == "TX"
        assert len(state.owners) == 0

    def test_no_website(self):
        state = initial_state("Blue Door Cafe", "Austin")
        assert state.domain is None
        assert state.business_info.website is None
        assert state.tag == "[Blue Door Cafe|no-domain]"


class TestAbsorbReviewSite:

    def test_owner_info_and_domain(self):
        state = absorb_review_site(initial_state("Blue Door Cafe", "Austin"), _yelp())
        owner = state.owners.get("maria-lopez")
        assert owner.title == "Owner"
        assert owner.source == OwnerSource.REVIEW_SITE
        assert owner.phone == "(512) 555-0100"
        assert state.domain == "bluedoorcafe.com"
        assert state.business_info.rating == 4.5
        assert state.business_info.price_level == "$$"
        assert state.business_info.address.zip == "78704"
        assert state.business_info.review_site_url.endswith("blue-door-cafe-austin")
        assert state.meta.review_site_found
        assert state.meta.owner_names_found == ["Maria Lopez"]

    def test_default_title(self):
        state = absorb_review_site(initial_state("Blue Door Cafe", "Austin"), _yelp(owner_title=None))
        assert state.owners.get("maria-lopez").title == "Business Owner"

    def test_none_is_noop(self):
        state = initial_state("Blue Door Cafe", "Austin")
        assert absorb_review_site(state, None) is state

    def test_does_not_mutate_input(self):
        state = initial_state("Blue Door Cafe", "Austin")
        absorb_review_site(state, _yelp())
        assert len(state.owners) == 0
        assert state.domain is None
        assert not state.meta.review_site_found

    def test_caller_website_wins(self):
        state = initial_state("Blue Door Cafe", "Austin", website="bluedoor.cafe")
        state = absorb_review_site(state, _yelp())
        assert state.domain == "bluedoor.cafe"
        assert state.business_info.website == "bluedoor.cafe"


class TestAbsorbMaps:

    def test_first_non_null_wins(self):
        state = absorb_review_site(initial_state("Blue Door Cafe", "Austin"), _yelp())
        maps = MapsRecord(
            maps_url="https://www.google.com/maps/place/?q=place_id:abc",
            phone="(512) 555-9999",
            rating=4.8,
            price_level=1,
        )
        state = absorb_maps(state, maps)
        assert state.business_info.phone == "(512) 555-0100"
        assert state.business_info.rating == 4.5
        assert state.business_info.price_level == "$$"
        assert state.business_info.maps_url.endswith("place_id:abc")
        assert state.meta.maps_found

    def test_responders_become_managers(self):
        maps = MapsRecord(
            maps_url="https://maps/x",
            owner_name="Maria Lopez",
            review_responder_names=["Dan Cho", "Maria Lopez", "Sam"],
        )
        state = absorb_maps(initial_state("Blue Door Cafe", "Austin"), maps)
        assert [(o.name, o.title) for o in state.owners.owners()] == [
            ("Maria Lopez", "Business Owner"),
            ("Dan Cho", "Manager"),
        ]
        assert all(o.source == OwnerSource.MAP_SERVICE for o in state.owners.owners())

    def test_review_site_title_preferred(self):
        state = absorb_review_site(initial_state("Blue Door Cafe", "Austin"), _yelp())
        state = absorb_maps(state, MapsRecord(maps_url="https://maps/x", review_responder_names=["Maria Lopez"]))
        owner = state.owners.get("maria-lopez")
        assert owner.title == "Owner"
        assert owner.source == OwnerSource.REVIEW_SITE

    def test_price_from_level(self):
        assert price_from_level(0) == "$"
        assert price_from_level(3) == "$$$$"
        assert price_from_level(None) is None


class TestAbsorbContacts:

    def test_contact_email_fills_existing_owner(self):
        state = absorb_review_site(initial_state("Blue Door Cafe", "Austin"), _yelp())
        result = ContactSearchResult(domain="bluedoorcafe.com", contacts=[
            ContactRecord(first_name="Maria", last_name="Lopez", title="CEO",
                          email="maria@bluedoorcafe.com", confidence=85),
        ])
        state = absorb_contacts(state, result)
        owner = state.owners.get("maria-lopez")
        assert owner.email == "maria@bluedoorcafe.com"
        assert owner.email_source == EmailSource.CONTACT_DATABASE
        assert owner.email_confidence == 85
        assert owner.title == "Owner"
        assert len(state.owners) == 1
        assert state.meta.contact_database_found
        assert state.meta.emails_found == ["maria@bluedoorcafe.com"]

    def test_skips_unnamed(self):
        result = ContactSearchResult(domain="a.com", contacts=[
            ContactRecord(first_name="Maria", email="maria@a.com"),
            ContactRecord(first_name="Dan", last_name="Cho"),
        ])
        state = absorb_contacts(initial_state("Blue Door Cafe", "Austin"), result)
        owners = state.owners.owners()
        assert [o.name for o in owners] == ["Dan Cho"]
        assert owners[0].title == "Contact"
        assert owners[0].email is None

    def test_domain_search_source(self):
        result = ContactSearchResult(domain="a.com", contacts=[
            ContactRecord(first_name="Dan", last_name="Cho", email="dan@a.com", confidence=92),
        ])
        state = absorb_contacts(
            initial_state("Blue Door Cafe", "Austin"), result,
            source=OwnerSource.DOMAIN_SEARCH, email_source=EmailSource.DOMAIN_SEARCH,
        )
        owner = state.owners.get("dan-cho")
        assert owner.source == OwnerSource.DOMAIN_SEARCH
        assert owner.email_source == EmailSource.DOMAIN_SEARCH
        assert owner.email_confidence == 92
        assert state.meta.domain_search_found
        assert not state.meta.contact_database_found

    def test_empty_result_still_found(self):
        state = absorb_contacts(initial_state("Blue Door Cafe", "Austin"), ContactSearchResult(domain="a.com"))
        assert state.meta.contact_database_found
        assert len(state.owners) == 0


class TestAbsorbDomainScrape:

    def test_owners_and_emails(self):
        record = DomainScrapeRecord(
            domain="a.com",
            owners=[ScrapedOwner(name="Dan Cho", title="Chef"), ScrapedOwner(name="Cher")],
            emails=[ScrapedEmail(email="dan@a.com"), ScrapedEmail(email="info@a.com", is_generic=True)],
        )
        state = absorb_domain_scrape(initial_state("Blue Door Cafe", "Austin"), record)
        assert [(o.name, o.title) for o in state.owners.owners()] == [("Dan Cho", "Chef")]
        assert state.owners.get("dan-cho").email is None
        assert state.meta.emails_found == ["dan@a.com", "info@a.com"]
        assert state.meta.domain_scrape_found

    def test_scraped_title_replaces_responder(self):
        maps = MapsRecord(maps_url="https://maps/x", review_responder_names=["Dan Cho"])
        state = absorb_maps(initial_state("Blue Door Cafe", "Austin"), maps)
        record = DomainScrapeRecord(domain="a.com", owners=[ScrapedOwner(name="Dan Cho", title="Owner")])
        state = absorb_domain_scrape(state, record)
        owner = state.owners.get("dan-cho")
        assert len(state.owners) == 1
        assert owner.title == "Owner"
        assert owner.source == OwnerSource.DOMAIN_SCRAPE


class TestAbsorbEmail:

    def test_sets_email_once(self):
        state = absorb_review_site(initial_state("Blue Door Cafe", "Austin"), _yelp())
        state = absorb_email(state, "maria-lopez", "maria@a.com", 91, EmailSource.FINDER)
        assert state.meta.finder_found
        again = absorb_email(state, "maria-lopez", "other@a.com", 60, EmailSource.DOMAIN_PATTERN)
        assert again is state
        assert again.owners.get("maria-lopez").email == "maria@a.com"


class TestStages:

    def test_mark_stage(self):
        state = mark_stage(initial_state("Blue Door Cafe", "Austin"), "domain-scrape")
        state = mark_stage(state, "domain-scrape")
        assert state.meta.stages_ran == ["domain-scrape"]
        assert state.ran("domain-scrape")
        assert not state.ran("contact-database")

    def test_verified_mailbox(self):
        suggestion = HospitalityEmail(email="gm@a.com", role="General Manager", confidence=90)
        state = absorb_verified_mailbox(initial_state("Blue Door Cafe", "Austin"), suggestion)
        assert state.hospitality_emails == (suggestion,)
        assert state.meta.pattern_verified
