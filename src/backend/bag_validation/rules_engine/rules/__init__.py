from .bagit import (
    BagHasOtherManifestsThanOnlyMd5,
    BagInfoContainsAtMostOneOf,
    BagInfoExistsAndIsWellformed,
    BagInfoIsVersionOfIsValidUrnUuid,
    BagInfoOrganizationalIdentifierPrefixIsValid,
    BagIsValid,
)
from .dataset_xml import (
    BagFileIsWellFormedXml,
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
)
from .files_xml import (
    FilesXmlFilePathAttributesContainLocalBagPath,
    FilesXmlNoDuplicateFilesAndEveryPayloadFileIsDescribed,
)
from .original_filepaths import OptionalBagFileIsUtf8Decodable, OptionalOriginalFilePathsIsComplete
from .structure import BagContainsDir, BagContainsFile, BagDirContainsNothingElseThan, BagDirDoesNotContain
from .vault import BagInfoIsVersionOfPointsToExistingDatasetInVaultCatalog

__all__ = [
    "BagIsValid",
    "BagInfoExistsAndIsWellformed",
    "BagInfoContainsAtMostOneOf",
    "BagInfoIsVersionOfIsValidUrnUuid",
    "BagInfoOrganizationalIdentifierPrefixIsValid",
    "BagHasOtherManifestsThanOnlyMd5",
    "BagContainsDir",
    "BagContainsFile",
    "BagDirContainsNothingElseThan",
    "BagDirDoesNotContain",
    "BagFileIsWellFormedXml",
    "DatasetXmlContainsExactlyOneDctermsLicenseWithXsiTypeUri",
    "DatasetXmlLicenseAllowed",
    "DatasetXmlIdentifiersAreValid",
    "DatasetXmlGmlPolygonPosListIsWellFormed",
    "DatasetXmlGmlPolygonsInSameMultiSurfaceHaveSameSrsName",
    "DatasetXmlGmlPointsHaveAtLeastTwoValues",
    "DatasetXmlArchisIdentifiersHaveAtMost10Characters",
    "DatasetXmlAllUrlsAreValid",
    "DatasetXmlHasRightsHolderInElement",
    "DatasetXmlDoesNotHaveRightHolderInAuthorRole",
    "DatasetXmlExactlyOneOfValueUriAndValueCode",
    "DatasetXmlValueUrisAreValid",
    "DatasetXmlValueCodesAreValid",
    "DatasetXmlContainsAtMostOneIdentifierWithIdTypeDoi",
    "DatasetXmlDoisAreValid",
    "FilesXmlFilePathAttributesContainLocalBagPath",
    "FilesXmlNoDuplicateFilesAndEveryPayloadFileIsDescribed",
    "OptionalBagFileIsUtf8Decodable",
    "OptionalOriginalFilePathsIsComplete",
    "BagInfoIsVersionOfPointsToExistingDatasetInVaultCatalog",
]
