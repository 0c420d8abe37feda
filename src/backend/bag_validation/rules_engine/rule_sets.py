from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from adapters.bagit.xml import DATASET_XML, FILES_XML, qname
from connectors.vault_catalog import VaultCatalogClient

from .catalog import RuleCatalog
from .registry import RuleCatalogBuilder
from .rules import (
    BagContainsDir,
    BagContainsFile,
    BagDirContainsNothingElseThan,
    BagDirDoesNotContain,
    BagFileIsWellFormedXml,
    BagHasOtherManifestsThanOnlyMd5,
    BagInfoContainsAtMostOneOf,
    BagInfoExistsAndIsWellformed,
    BagInfoIsVersionOfIsValidUrnUuid,
    BagInfoIsVersionOfPointsToExistingDatasetInVaultCatalog,
    BagInfoOrganizationalIdentifierPrefixIsValid,
    BagIsValid,
    DatasetXmlAllUrlsAreValid,
    DatasetXmlArchisIdentifiersHaveAtMost10Characters,
    DatasetXmlContainsAtMostOneIdentifierWithIdTypeDoi,
    DatasetXmlContainsExactlyOneDctermsLicenseWithXsiTypeUri,
    DatasetXmlDoesNotHaveRightHolderInAuthorRole,
    DatasetXmlDoisAreValid,
    DatasetXmlExactlyOneOfValueUriAndValueCode,
    DatasetXmlGmlPointsHaveAtLeastTwoValues,
    DatasetXmlGmlPolygonPosListIsWellFormed,
    DatasetXmlGmlPolygonsInSameMultiSurfaceHaveSameSrsName,
    DatasetXmlHasRightsHolderInElement,
    DatasetXmlIdentifiersAreValid,
    DatasetXmlLicenseAllowed,
    DatasetXmlValueCodesAreValid,
    DatasetXmlValueUrisAreValid,
    FilesXmlFilePathAttributesContainLocalBagPath,
    FilesXmlNoDuplicateFilesAndEveryPayloadFileIsDescribed,
    OptionalBagFileIsUtf8Decodable,
    OptionalOriginalFilePathsIsComplete,
)


class ValidationContext(str, Enum):
    DATA_STATION = "data-station"
    VAAS = "vaas"


@dataclass(frozen=True)
class RuleSetDependencies:
    other_id_prefixes: Tuple[str, ...] = ()
    allowed_licenses: FrozenSet[str] = frozenset()
    scheme_uri_to_valid_term_uris: Dict[str, FrozenSet[str]] = field(default_factory=dict)
    scheme_uri_to_valid_codes: Dict[str, FrozenSet[str]] = field(default_factory=dict)
    vault_catalog_client: Optional[VaultCatalogClient] = None


class RuleSets:
    """The DANS BagIt profile rules, as a common core plus one suffix per validation context."""

    def __init__(self, deps: RuleSetDependencies):
        self._deps = deps

    def common(self) -> RuleCatalog:
        deps = self._deps
        return (
            RuleCatalogBuilder()
            # 1 BagIt
            .add("1.1.1", BagIsValid())
            .add("1.2.1", BagInfoExistsAndIsWellformed())
            .add("1.2.3(a)", BagInfoContainsAtMostOneOf("Is-Version-Of"), ["1.2.1"])
            .add("1.2.3(b)", BagInfoIsVersionOfIsValidUrnUuid(), ["1.2.3(a)"])
            .add("1.2.4(a)", BagInfoContainsAtMostOneOf("Has-Organizational-Identifier"), ["1.2.1"])
            .add("1.2.4(b)", BagInfoContainsAtMostOneOf("Has-Organizational-Identifier-Version"), ["1.2.4(a)"])
            .add("1.2.4(c)", BagInfoOrganizationalIdentifierPrefixIsValid(deps.other_id_prefixes), ["1.2.4(a)"])
            .add("1.3.1", BagHasOtherManifestsThanOnlyMd5(), ["1.1.1"])
            # 2 Structural
            .add("2.1", BagContainsDir("metadata"), ["1.1.1"])
            .add("2.2(a)", BagContainsFile(DATASET_XML.as_posix()), ["2.1"])
            .add("2.2(b)", BagContainsFile(FILES_XML.as_posix()), ["2.1"])
            .add("2.3", BagDirContainsNothingElseThan("metadata", ["dataset.xml", "files.xml"]), ["2.1"])
            # 3.1 metadata/dataset.xml
            .add("3.1.1", BagFileIsWellFormedXml(DATASET_XML.as_posix(), qname("ddm", "DDM")), ["1.1.1", "2.2(a)"])
            .add("3.1.2", DatasetXmlContainsExactlyOneDctermsLicenseWithXsiTypeUri(), ["3.1.1"])
            .add("3.1.3(a)", DatasetXmlIdentifiersAreValid("DAI"), ["3.1.1"])
            .add("3.1.3(b)", DatasetXmlIdentifiersAreValid("ISNI"), ["3.1.1"])
            .add("3.1.3(c)", DatasetXmlIdentifiersAreValid("ORCID"), ["3.1.1"])
            .add("3.1.4", DatasetXmlGmlPolygonPosListIsWellFormed(), ["3.1.1"])
            .add("3.1.5", DatasetXmlGmlPolygonsInSameMultiSurfaceHaveSameSrsName(), ["3.1.1"])
            .add("3.1.6", DatasetXmlGmlPointsHaveAtLeastTwoValues(), ["3.1.1"])
            .add("3.1.7", DatasetXmlArchisIdentifiersHaveAtMost10Characters(), ["3.1.1"])
            .add("3.1.8", DatasetXmlAllUrlsAreValid(), ["3.1.1"])
            .add("3.1.9", DatasetXmlHasRightsHolderInElement(), ["3.1.1"])
            .add("3.1.10", DatasetXmlDoesNotHaveRightHolderInAuthorRole(), ["3.1.1"])
            .add("3.1.11", DatasetXmlExactlyOneOfValueUriAndValueCode(), ["3.1.1"])
            .add("3.1.12(a)", DatasetXmlValueUrisAreValid(deps.scheme_uri_to_valid_term_uris), ["3.1.1"])
            .add("3.1.12(b)", DatasetXmlValueCodesAreValid(deps.scheme_uri_to_valid_codes), ["3.1.1"])
            # 3.2 metadata/files.xml
            .add("3.2.1", BagFileIsWellFormedXml(FILES_XML.as_posix(), qname("files", "files")), ["1.1.1", "2.2(b)"])
            .add("3.2.2", FilesXmlFilePathAttributesContainLocalBagPath(), ["3.2.1"])
            .add("3.2.3", FilesXmlNoDuplicateFilesAndEveryPayloadFileIsDescribed(), ["3.2.1"])
            # 3.3 original-filepaths.txt
            .add("3.3.1", OptionalBagFileIsUtf8Decodable("original-filepaths.txt"), ["1.1.1"])
            .add("3.3.2", OptionalOriginalFilePathsIsComplete(), ["3.3.1", "3.2.1"])
            .build()
        )

    def data_station(self) -> RuleCatalog:
        suffix = (
            RuleCatalogBuilder(self.common())
            .add("4.2", DatasetXmlLicenseAllowed(self._deps.allowed_licenses), ["3.1.2"])
            .add("4.4", BagDirDoesNotContain("data", ["original-metadata.zip"]), ["1.1.1"])
        )
        return suffix.build()

    def vaas(self) -> RuleCatalog:
        # 5 Vault as a Service
        suffix = (
            RuleCatalogBuilder(self.common())
            .add(
                "5.1",
                BagInfoIsVersionOfPointsToExistingDatasetInVaultCatalog(self._deps.vault_catalog_client),
                ["1.2.1", "3.1.1"],
            )
            .add("5.2(a)", DatasetXmlContainsAtMostOneIdentifierWithIdTypeDoi(), ["3.1.1"])
            .add("5.2(b)", DatasetXmlDoisAreValid(), ["5.2(a)"])
        )
        return suffix.build()

    def catalog_for(self, context: ValidationContext) -> RuleCatalog:
        if context == ValidationContext.DATA_STATION:
            return self.data_station()
        if context == ValidationContext.VAAS:
            return self.vaas()
        raise ValueError(f"Unknown validation context: {context}")
