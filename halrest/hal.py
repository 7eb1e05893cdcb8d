# Hypertext Application Language (HAL) documents
#
# http://stateless.co/hal_specification.html
# A representation holds links, plain properties and embedded representations:
# {
#     "_links": {"self": {"href": "authors/1"}, "books": {"href": "authors/1/books"}},
#     "_embedded": {"books": [{...}, ...]},
#     "name": "Frank Herbert"
# }
#
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

SELF_REL = "self"
HAL_MEDIATYPE = "application/hal+json"


class Link:
    """
    HAL link object
    """

    def __init__(self, rel: str, href: str) -> None:
        self.rel = rel
        self.href = href

    def __repr__(self) -> str:
        return f"<Link {self.rel}: {self.href}>"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Link) and (self.rel, self.href) == (other.rel, other.href)

    def to_dict(self, url_root: Optional[str] = None) -> Dict[str, str]:
        href = self.href
        if url_root:
            # relative hrefs are resolved against the root, absolute ones are kept
            href = urljoin(url_root if url_root.endswith("/") else url_root + "/", href)
        return {"href": href}


class Representation:
    """
    HAL resource object, built with the `with_*` methods (which return the representation itself)
    """

    def __init__(self) -> None:
        self.links: Dict[str, List[Link]] = {}
        self.properties: Dict[str, Any] = {}
        self.embedded: Dict[str, List["Representation"]] = {}
        # relations that are rendered as a list of links, even when they hold a single link
        self.link_lists = set()

    def __repr__(self) -> str:
        return f"<Representation {self.link.href if self.link else ''}>"

    @property
    def link(self) -> Optional[Link]:
        """
        :return: the self link
        """
        links = self.links.get(SELF_REL)
        return links[0] if links else None

    def get_link(self, rel: str) -> Optional[Link]:
        links = self.links.get(rel)
        return links[0] if links else None

    def with_link(self, rel: str, href: str) -> "Representation":
        self.links.setdefault(rel, []).append(Link(rel, href))
        return self

    def with_link_list(self, rel: str) -> "Representation":
        """
        Render `rel` as a list of links
        """
        self.link_lists.add(rel)
        self.links.setdefault(rel, [])
        return self

    def with_property(self, name: str, value: Any) -> "Representation":
        self.properties[name] = value
        return self

    def with_representation(self, rel: str, representation: "Representation") -> "Representation":
        self.embedded.setdefault(rel, []).append(representation)
        return self

    def with_embedded(self, rel: str) -> "Representation":
        """
        Declare an embedded relation so it's rendered even when it holds no representation
        """
        self.embedded.setdefault(rel, [])
        return self

    def to_dict(self, url_root: Optional[str] = None) -> Dict[str, Any]:
        """
        :param url_root: if set, relative hrefs are made absolute
        :return: json serializable HAL document
        """
        result = {}
        links = {}
        for rel, rel_links in self.links.items():
            if not rel_links:
                continue
            if rel in self.link_lists or len(rel_links) > 1:
                links[rel] = [link.to_dict(url_root) for link in rel_links]
            else:
                links[rel] = rel_links[0].to_dict(url_root)
        if links:
            result["_links"] = links
        if self.embedded:
            result["_embedded"] = {
                rel: [representation.to_dict(url_root) for representation in representations]
                for rel, representations in self.embedded.items()
            }
        result.update(self.properties)
        return result
